import numpy as np
from .._errors import DimensionMismatchError

# Base functions: Data partitioning --------------------------


def PartitionData(
    X,
    NodePositions,
    MaxBlockSize,
    SquaredX,
    TrimmingRadius=float("inf"),
):
    """
    # Partition the data by proximity to graph nodes
    # (same step as in K-means EM procedure)
    #
    # Inputs:
    #   X is n-by-m matrix of datapoints with one data point per row. n is
    #       number of data points and m is dimension of data space.
    #   NodePositions is k-by-m matrix of embedded coordinates of graph nodes,
    #       where k is number of nodes and m is dimension of data space.
    #   MaxBlockSize integer number which defines maximal number of
    #       simultaneously calculated distances. Maximal size of created matrix
    #       is MaxBlockSize-by-k, where k is number of nodes.
    #   SquaredX is n-by-1 vector of data vectors length: SquaredX = sum(X.^2,2);
    #   TrimmingRadius (optional) is the trimming radius. Points farther than
    #       TrimmingRadius from every node are not associated with any node.
    #
    # Outputs
    #   partition is n-by-1 vector. partition[i] is number of the node which is
    #       associated with data point X[i, ], or -1 if the point is trimmed.
    #   dists is n-by-1 vector. dists[i] is squared distance between the node with
    #       number partition[i] and data point X[i, ].
    """
    n = X.shape[0]
    partition = np.zeros((n, 1), dtype=int)
    dists = np.zeros((n, 1))
    if n == 0 or len(NodePositions) == 0:
        partition[:] = -1
        return partition, dists

    MaxBlockSize = max(int(MaxBlockSize), 1)
    # Calculate squared length of centroids
    cent = NodePositions.T
    centrLength = (cent ** 2).sum(axis=0)
    for i in range(0, n, MaxBlockSize):
        # Define last element for calculation
        last = min(i + MaxBlockSize, n)
        # Calculate distances
        _d = SquaredX[i:last] + centrLength - 2 * np.dot(X[i:last,], cent)
        tmp = _d.argmin(axis=1)
        partition[i:last] = tmp[:, np.newaxis]
        dists[i:last] = _d[np.arange(_d.shape[0]), tmp][:, np.newaxis]

    # cancellation in the expansion above may give tiny negative values
    dists[dists < 0] = 0

    # Apply trimming
    if not np.isinf(TrimmingRadius):
        ind = dists > (TrimmingRadius ** 2)
        partition[ind] = -1
        dists[ind] = TrimmingRadius ** 2

    return partition, dists


# Base function: Function to deal with elastic matrices --------------------------


def Encode2ElasticMatrix(Edges, Lambdas, Mus, NumberOfNodes=None):
    """
    Create an Elastic matrix from a set of edges

    Lambdas the lambda parameters. Either a single value (which will be used for all the edges),
    or a vector containing the values for each edge
    Mus the mu parameters. Either a single value (which will be used for all the nodes),
    or a vector containing the values for each node
    Edges an e-by-2 matrix containing the index of the edges connecting the nodes
    NumberOfNodes the size of the matrix. Defaults to the largest node id + 1

    Return
    -------
    the elastic matrix
    """
    Edges = np.asarray(Edges, dtype=int).reshape(-1, 2)
    if NumberOfNodes is None:
        NumberOfNodes = np.max(Edges) + 1 if len(Edges) > 0 else 0
    NumberOfEdges = Edges.shape[0]

    EM = np.zeros((NumberOfNodes, NumberOfNodes))

    if np.isscalar(Lambdas):
        Lambdas = np.array([Lambdas] * NumberOfEdges, dtype=float)

    if np.isscalar(Mus):
        Mus = np.array([Mus] * NumberOfNodes, dtype=float)

    for i in range(NumberOfEdges):
        EM[Edges[i, 0], Edges[i, 1]] = Lambdas[i]
        EM[Edges[i, 1], Edges[i, 0]] = Lambdas[i]

    return EM + np.diag(Mus)


# Checks on principal graph structures --------------------------


def CheckPrincipalGraph(PG, X=None):
    """
    Validate the shapes of a principal graph dict before editing it

    PG a principal graph with the keys "NodePositions", "Edges" (edges, lambdas[, mus])
    and optionally "ElasticMatrix"
    X optional data matrix whose dimension must match the node positions

    Raises DimensionMismatchError when the structure is inconsistent. Self-loops and
    parallel edges are not supported
    """
    NodePositions = np.asarray(PG["NodePositions"])
    if NodePositions.ndim != 2:
        raise DimensionMismatchError(
            "NodePositions must be a 2-dimensional matrix, got shape "
            + str(NodePositions.shape)
        )
    nNodes = NodePositions.shape[0]

    Edges = np.asarray(PG["Edges"][0])
    if Edges.size == 0:
        Edges = Edges.reshape(0, 2)
    if Edges.ndim != 2 or Edges.shape[1] != 2:
        raise DimensionMismatchError(
            "Edges must be a e-by-2 matrix, got shape " + str(Edges.shape)
        )
    if not np.issubdtype(Edges.dtype, np.integer) and not np.all(
        np.mod(Edges, 1) == 0
    ):
        raise DimensionMismatchError("Edges must contain integer node ids")
    if len(Edges) > 0 and (Edges.min() < 0 or Edges.max() >= nNodes):
        raise DimensionMismatchError(
            "Edges reference node ids outside [0, " + str(nNodes) + ")"
        )
    if np.any(Edges[:, 0] == Edges[:, 1]):
        raise DimensionMismatchError("Edges contain self-loops")
    if len(np.unique(np.sort(Edges, axis=1), axis=0)) != len(Edges):
        raise DimensionMismatchError("Edges contain parallel edges")

    if len(PG["Edges"]) > 1 and PG["Edges"][1] is not None:
        if len(np.atleast_1d(PG["Edges"][1])) != len(Edges):
            raise DimensionMismatchError(
                "The number of Lambdas does not match the number of edges"
            )
    if len(PG["Edges"]) > 2 and PG["Edges"][2] is not None:
        if len(np.atleast_1d(PG["Edges"][2])) != nNodes:
            raise DimensionMismatchError(
                "The number of Mus does not match the number of nodes"
            )

    if PG.get("ElasticMatrix") is not None:
        if np.shape(PG["ElasticMatrix"]) != (nNodes, nNodes):
            raise DimensionMismatchError(
                "ElasticMatrix must be "
                + str(nNodes)
                + "-by-"
                + str(nNodes)
                + ", got shape "
                + str(np.shape(PG["ElasticMatrix"]))
            )

    if X is not None:
        X = np.asarray(X)
        if X.ndim != 2 or X.shape[1] != NodePositions.shape[1]:
            raise DimensionMismatchError(
                "X must be a matrix with "
                + str(NodePositions.shape[1])
                + " columns, got shape "
                + str(X.shape)
            )

    return NodePositions, Edges.astype(int)
