import numpy as np
from .core import PartitionData


def project_point_onto_graph(X, NodePositions, Edges, Partition=None, MaxBlockSize=100000):
    r"""
    #' Project data points on the principal graph
    #'
    #' @param X numerical matrix containg points on the rows and dimensions on the columns
    #' @param NodePositions numerical matrix containg the positions of the nodes on the rows
    #' (must have the same dimensionality of X)
    #' @param Edges a 2-dimensional matrix containing edges as pairs of integers. The integers much
    #' match the rows of NodePositions
    #' @param Partition a Partition vector associating points to at most one of the nodes of the graph
    #' (-1 for points that are not associated with any node).
    #' It can be None, in which case it will be computed by the algorithm
    #'
    #' @return A dict with several elements:
    #' \itemize{
    #'  \item{"X_projected "}{A matrix containing the projection of the points (on rows) on the edges of the graph}
    #'  \item{"MSEP "}{The mean squared error (distance) of the points from the graph}
    #'  \item{"ProjectionValues "}{The normalized position of the point on its associted edge.
    #'  A value <0 indicates a projection before the initial position of the node.
    #'  A value >1 indicates a projection after the final position of the node.
    #'  A value betwen 0 and 1 indicates at which percentage of the edge length the point is being projected,
    #'  e.g., a value of 0.3 indicates the 30\%.}
    #'  \item{"EdgeID "}{An integer indicating the id of the edge on which each point has been projected. Note that
    #'  if a point is projected on a node, this id will indicate one of the edges connected to that node.
    #'  Points without a node (trimmed) have id -1}
    #'  \item{"EdgeLen "}{The length of the edges described by the Edges input matrix}
    #'  \item{"NodePositions "}{the NodePositions input matrix}
    #'  \item{"Edges "}{the Edges input matrix}
    #' }
    """
    Edges = np.asarray(Edges, dtype=int).reshape(-1, 2)

    if Partition is None:
        Partition = PartitionData(
            X, NodePositions, MaxBlockSize, SquaredX=np.sum(X ** 2, axis=1, keepdims=1)
        )[0]
    Partition = np.asarray(Partition).flatten()

    X_projected = np.zeros(X.shape)
    ProjectionValues = np.array([np.inf] * len(X))
    Distances_squared = np.array([np.inf] * len(X))
    EdgeID = np.full(len(X), -1, dtype=int)
    EdgeLen = np.array([np.inf] * len(Edges))

    for i in range(len(Edges)):
        Idxs = np.where(np.isin(Partition, Edges[i, :]))[0]

        PrjStruct = project_point_onto_edge(
            X=X[Idxs, :], NodePositions=NodePositions[Edges[i, :], :], Edge=np.array([0, 1])
        )

        if len(Idxs) > 0:
            ToFill = PrjStruct["Distance_Squared"] < Distances_squared[Idxs]
            X_projected[Idxs[ToFill], :] = PrjStruct["X_Projected"][ToFill, :]
            ProjectionValues[Idxs[ToFill]] = PrjStruct["Projection_Value"][ToFill]
            Distances_squared[Idxs[ToFill]] = PrjStruct["Distance_Squared"][ToFill]
            EdgeID[Idxs[ToFill]] = i

        EdgeLen[i] = np.sqrt(PrjStruct["EdgeLen_Squared"])

    Assigned = EdgeID >= 0
    if np.any(Assigned):
        MSEP = np.mean(Distances_squared[Assigned])
    else:
        MSEP = np.nan

    return dict(
        X_projected=X_projected,
        MSEP=MSEP,
        ProjectionValues=ProjectionValues,
        EdgeID=EdgeID,
        EdgeLen=EdgeLen,
        NodePositions=NodePositions,
        Edges=Edges,
    )


def project_point_onto_edge(X, NodePositions, Edge, ExtProj=False):
    """
    #' Project data points on a single edge
    #'
    #' @param X numerical matrix containg points on the rows
    #' @param NodePositions numerical matrix containg the positions of the nodes on the rows
    #' @param Edge a pair of node ids. The projection value is 0 on Edge[0] and 1 on Edge[1]
    #' @param ExtProj boolean, should points beyond the edge be projected on the line
    #' supporting the edge instead of the closest node
    #'
    #' @return A dict with X_Projected, Projection_Value, Distance_Squared and EdgeLen_Squared
    """
    X = np.atleast_2d(X)
    vec = (NodePositions[Edge[1], :] - NodePositions[Edge[0], :])[:, None]
    EdgeLen_Squared = np.sum(vec ** 2)

    if EdgeLen_Squared > 0:
        u = ((X - NodePositions[Edge[0]]) @ vec).flatten() / EdgeLen_Squared
    else:
        u = np.zeros(len(X))
    u[~np.isfinite(u)] = 0

    X_Projected = np.zeros(X.shape)

    if np.any(u < 0):
        X_Projected[u < 0, :] = NodePositions[Edge[0], :]

    if np.any(u > 1):
        X_Projected[u > 1, :] = NodePositions[Edge[1], :]

    if ExtProj:
        OnEdge = np.array([True] * len(u))
    else:
        OnEdge = (u >= 0) & (u <= 1)

    if np.any(OnEdge):
        X_Projected[OnEdge, :] = u[OnEdge][:, None] * vec.T + NodePositions[Edge[0]]

    distance_squared = np.sum((X_Projected - X) * (X_Projected - X), axis=1)

    return dict(
        X_Projected=X_Projected,
        Projection_Value=u,
        Distance_Squared=distance_squared,
        EdgeLen_Squared=EdgeLen_Squared,
    )
