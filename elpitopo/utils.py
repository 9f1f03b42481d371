import numpy as np
import networkx as nx
from .src.core import PartitionData, Encode2ElasticMatrix, CheckPrincipalGraph
from .src.reporting import project_point_onto_graph


def makePrincipalGraph(NodePositions, Edges, Lambda=0.01, Mu=0.1):
    """Build a principal graph dict from node positions and edges

    Lambda: float or array of length len(Edges)
        elasticity of the edges
    Mu: float or array of length len(NodePositions)
        elasticity of the stars. With a float, only nodes with more than one
        neighbour get Mu, as in elpigraph.src.core.MakeUniformElasticMatrix
    """
    NodePositions = np.array(NodePositions, dtype=float)
    Edges = np.array(Edges, dtype=int).reshape(-1, 2)
    nNodes = len(NodePositions)

    if np.isscalar(Lambda):
        Lambdas = np.repeat(float(Lambda), len(Edges))
    else:
        Lambdas = np.array(Lambda, dtype=float)

    if np.isscalar(Mu):
        Connect = np.bincount(Edges.flatten(), minlength=nNodes)
        Mus = np.where(Connect > 1, float(Mu), 0.0)
    else:
        Mus = np.array(Mu, dtype=float)

    PG = dict(
        NodePositions=NodePositions,
        Edges=[Edges, Lambdas, Mus],
        ElasticMatrix=Encode2ElasticMatrix(Edges, Lambdas, Mus, NumberOfNodes=nNodes),
    )
    CheckPrincipalGraph(PG)
    return PG


def getProjection(X, PG, TrimmingRadius=float("inf")):
    """Compute graph projection from principal graph dict

    Returns a dict with the node partition (node_id, -1 for trimmed points),
    the squared distance to the node (node_dist), the edge each point is
    projected on (edge_id, -1 for trimmed points), the position on the edge
    (edge_loc), the projected points, the sparse connectivity matrix of the
    graph (conn), the edge lengths and the MSEP.
    PG is not modified.
    """
    X = np.asarray(X, dtype=float)
    NodePositions, Edges = CheckPrincipalGraph(PG, X)

    G = nx.Graph()
    G.add_nodes_from(range(len(NodePositions)))
    G.add_edges_from(Edges.tolist(), weight=1)
    mat_conn = nx.to_scipy_sparse_array(
        G, nodelist=list(range(len(NodePositions))), weight="weight"
    )

    # partition points
    node_id, node_dist = PartitionData(
        X=X,
        NodePositions=NodePositions,
        MaxBlockSize=100000,
        SquaredX=np.sum(X ** 2, axis=1, keepdims=1),
        TrimmingRadius=TrimmingRadius,
    )
    # project points onto edges
    dict_proj = project_point_onto_graph(
        X=X, NodePositions=NodePositions, Edges=Edges, Partition=node_id
    )

    return dict(
        node_id=node_id.flatten(),
        node_dist=node_dist.flatten(),
        edge_id=dict_proj["EdgeID"],
        edge_loc=dict_proj["ProjectionValues"],
        X_projected=dict_proj["X_projected"],
        conn=mat_conn,
        edge_len=dict_proj["EdgeLen"],
        MSEP=dict_proj["MSEP"],
    )
