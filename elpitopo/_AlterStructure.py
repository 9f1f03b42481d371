import numpy as np
import pandas as pd
import copy
import warnings
from ._errors import (
    InvalidLeafError,
    InvalidModeError,
    EmptySelectionError,
)
from .src.graphs import ConstructGraph, GetBranches, GetConnectedGroups, GetLeaves
from .src.core import PartitionData, CheckPrincipalGraph
from .src.distutils import PartialDistance
from .src.reporting import project_point_onto_graph, project_point_onto_edge


ExtensionModes = ("QuantCentroid", "WeightedCentroid")

CollapseModes = {
    "PointNumber": "PointsOnEdges",
    "PointNumber_Extrema": "PointsOnEdgeExtBoth",
    "PointNumber_Leaves": "PointsOnEdgesLeaf",
    "EdgesNumber": "EdgesCount",
    "EdgesLength": "EdgesLen",
}


def _AsIDs(IDs):
    if isinstance(IDs, (set, frozenset)):
        IDs = sorted(IDs)
    return np.asarray(IDs, dtype=int).reshape(-1)


def _SameContainer(Original, Items):
    if isinstance(Original, tuple):
        return tuple(Items)
    return list(Items)


def ExtendLeaves(
    X,
    PG,
    Mode="QuantCentroid",
    ControlPar=0.9,
    LeafIDs=None,
    TrimmingRadius=float("inf"),
    verbose=False,
):
    """
    #' Extend leaves with additional nodes
    #'
    #' @param X numeric matrix, the data matrix
    #' @param PG dict, the ElPiGraph structure to extend
    #' @param Mode string, the mode used to extend the graph. "QuantCentroid" and "WeightedCentroid" are currently implemented
    #' @param ControlPar positive numeric, the parameter used to control the contribution of the different data points
    #' @param LeafIDs integer vector, the id of nodes to extend. If None, all the leaves will be extended.
    #' @param TrimmingRadius positive numeric, the trimming radius used to control distance
    #' @param verbose boolean, should the number of selected points be printed
    #'
    #' @return The extended ElPiGraph structure. One node and one edge (leaf, new node) are added for each leaf.
    #' The Lambdas of the new edges and the Mus of the new nodes are NaN, they need to be set by a refit.
    #'
    #' The value of ControlPar has a different interpretation depending on the value of Mode. In each case, only the
    #' extreme points, i.e., the points associated with the leaf node that are projected before the leaf on its edge,
    #' contribute to the position of the new node.
    #'
    #' If Mode = "QuantCentroid", for each leaf node, the extreme points are ordered by their distance from the node
    #' and the centroid of the points farther away than the ControlPar quantile is returned.
    #'
    #' If Mode = "WeightedCentroid", for each leaf node, a weight is computed for each points by raising the distance to
    #' the 2*ControlPar power. Hence, larger values of ControlPar result in a larger influence of points farther from the node
    #'
    #' Raises InvalidLeafError if one of LeafIDs is not a leaf and EmptySelectionError if a leaf has no
    #' point to compute the new position from.
    """
    if Mode not in ExtensionModes:
        raise InvalidModeError(
            "Mode " + str(Mode) + " is not defined. Use one of " + ", ".join(ExtensionModes)
        )
    if Mode == "WeightedCentroid" and ControlPar < 0:
        raise ValueError("ControlPar must be non-negative when Mode = 'WeightedCentroid'")

    X = np.asarray(X, dtype=float)
    NodePositions, Edges = CheckPrincipalGraph(PG, X)
    NodePositions = NodePositions.astype(float)

    TargetPG = copy.deepcopy(PG)
    # Generate net
    Net = ConstructGraph(PrintGraph=TargetPG)
    Degree = np.array(Net.degree(), dtype=int)

    # get leafs
    if LeafIDs is None:
        LeafIDs = GetLeaves(Net)
    LeafIDs = _AsIDs(LeafIDs)
    _, FirstSeen = np.unique(LeafIDs, return_index=True)
    LeafIDs = LeafIDs[np.sort(FirstSeen)]

    # check LeafIDs
    if np.any((LeafIDs < 0) | (LeafIDs >= len(NodePositions))):
        raise InvalidLeafError(
            "Nodes " + str(LeafIDs[(LeafIDs < 0) | (LeafIDs >= len(NodePositions))]) + " do not exist"
        )
    if np.any(Degree[LeafIDs] != 1):
        raise InvalidLeafError(
            "Only leaf nodes can be extended. Nodes "
            + str(LeafIDs[Degree[LeafIDs] != 1])
            + " do not have degree 1"
        )

    # and their neigh
    NeiVect = np.array([Net.neighbors(int(i))[0] for i in LeafIDs], dtype=int)
    NodesMat = np.column_stack((LeafIDs, NeiVect)).astype(int)

    # project data on the nodes
    PD = PartitionData(
        X=X,
        NodePositions=NodePositions,
        MaxBlockSize=100000,
        TrimmingRadius=TrimmingRadius,
        SquaredX=np.sum(X ** 2, axis=1, keepdims=1),
    )
    Partition = PD[0].flatten()

    # Keep track of the new nodes IDs
    NodeID = len(NodePositions) - 1

    NNPos = np.zeros((0, NodePositions.shape[1]))
    NEdgs = np.zeros((0, 2), dtype=int)

    # for each leaf
    for i in range(len(NodesMat)):

        # generate the new node id
        NodeID = NodeID + 1

        # get all the data associated with the leaf node
        tData = X[Partition == NodesMat[i, 0], :]

        if len(tData) == 0:
            raise EmptySelectionError(
                "No data point is associated with leaf " + str(NodesMat[i, 0])
            )

        # and project them on the edge
        Proj = project_point_onto_edge(
            X=tData, NodePositions=NodePositions, Edge=NodesMat[i, :]
        )

        # distances of the associated points from the leaf
        Dists = PartialDistance(tData, NodePositions[[NodesMat[i, 0]], :]).flatten()

        # Set distances of points projected beyond the initial position of the edge to 0
        Dists[Proj["Projection_Value"] >= 0] = 0

        if Mode == "QuantCentroid":
            if not np.any(Dists > 0):
                raise EmptySelectionError(
                    "No point lies beyond leaf " + str(NodesMat[i, 0])
                )

            ThrDist = np.quantile(Dists[Dists > 0], ControlPar)
            SelPoints = np.where(Dists >= ThrDist)[0]

            if verbose:
                print(
                    len(SelPoints),
                    "points selected to compute the centroid while extending node",
                    NodesMat[i, 0],
                )

            if len(SelPoints) > 1:
                NN = np.mean(tData[SelPoints, :], axis=0)
            else:
                NN = tData[SelPoints[0], :]

        if Mode == "WeightedCentroid":
            # relative to the farthest point, Dists ** (2 * ControlPar) overflows for large ControlPar
            if np.max(Dists) > 0:
                Wei = (Dists / np.max(Dists)) ** (2 * ControlPar)
            else:
                Wei = Dists ** (2 * ControlPar)

            if not np.max(Wei) > 0:
                raise EmptySelectionError(
                    "All the points associated with leaf "
                    + str(NodesMat[i, 0])
                    + " have weight 0"
                )

            if verbose:
                print(
                    np.sum(Wei > 0),
                    "points with positive weight while extending node",
                    NodesMat[i, 0],
                )

            NN = np.sum(tData * Wei[:, None], axis=0) / np.sum(Wei)

        NNPos = np.vstack((NNPos, NN))
        NEdgs = np.vstack((NEdgs, np.array([[NodesMat[i, 0], NodeID]])))

    TargetPG["NodePositions"] = np.vstack((NodePositions, NNPos))

    NewEdges = [np.vstack((Edges, NEdgs)).astype(int)]
    if len(PG["Edges"]) > 1:
        Lambdas = PG["Edges"][1]
        if Lambdas is not None:
            Lambdas = np.append(np.asarray(Lambdas, dtype=float), np.repeat(np.nan, len(NEdgs)))
        NewEdges.append(Lambdas)
    if len(PG["Edges"]) > 2:
        Mus = PG["Edges"][2]
        if Mus is not None:
            Mus = np.append(np.asarray(Mus, dtype=float), np.repeat(np.nan, len(NNPos)))
        NewEdges.append(Mus)
    TargetPG["Edges"] = _SameContainer(PG["Edges"], NewEdges)

    if PG.get("ElasticMatrix") is not None and len(NEdgs) > 0:
        nNodes = len(TargetPG["NodePositions"])
        ElasticMatrix = np.zeros((nNodes, nNodes))
        ElasticMatrix[: len(NodePositions), : len(NodePositions)] = PG["ElasticMatrix"]
        TargetPG["ElasticMatrix"] = ElasticMatrix
        warnings.warn(
            "The elastic matrix does not encode the "
            + str(len(NEdgs))
            + " new edges. Refit the graph to set their elasticity."
        )

    return TargetPG


def _BranchStatistics(X, NodePositions, Edges, Net, TrimmingRadius):
    # Get the leaves
    Leaves = GetLeaves(Net)

    # get the partition
    PartStruct = PartitionData(
        X=X,
        NodePositions=NodePositions,
        MaxBlockSize=100000,
        TrimmingRadius=TrimmingRadius,
        SquaredX=np.sum(X ** 2, axis=1, keepdims=1),
    )

    # Project points onto the graph
    ProjStruct = project_point_onto_graph(
        X=X, NodePositions=NodePositions, Edges=Edges, Partition=PartStruct[0]
    )
    EdgeID = ProjStruct["EdgeID"]
    ProjectionValues = ProjStruct["ProjectionValues"]

    Assigned = EdgeID >= 0
    EdgeStart = np.full(len(EdgeID), -1)
    EdgeEnd = np.full(len(EdgeID), -1)
    EdgeStart[Assigned] = Edges[EdgeID[Assigned], 0]
    EdgeEnd[Assigned] = Edges[EdgeID[Assigned], 1]

    def BeyondNode(Node):
        # points projected past Node on one of the edges incident to Node
        return ((EdgeStart == Node) & (ProjectionValues < 0)) | (
            (EdgeEnd == Node) & (ProjectionValues > 1)
        )

    # get branches
    Branches = GetBranches(Net)

    AllBrInfo = []
    for NodeNames in Branches:
        PotentialPoints = np.zeros(len(EdgeID), dtype=bool)
        nSegments = len(NodeNames) - 1
        EdgLen = 0.0

        # Get the points on the branch (extrema are excluded)
        for i in range(1, len(NodeNames)):
            WorkingEdg = Net.get_eid(int(NodeNames[i - 1]), int(NodeNames[i]))
            EdgLen = EdgLen + ProjStruct["EdgeLen"][WorkingEdg]

            Points = EdgeID == WorkingEdg
            PV = ProjectionValues[Points]

            # Is the edge in the right direction?
            if Edges[WorkingEdg, 0] != NodeNames[i - 1]:
                PV = 1 - PV

            First = i == 1
            Last = i == nSegments

            OnSegment = np.ones(len(PV), dtype=bool)
            # beyond the start of the branch
            if First or not Last:
                OnSegment &= PV > 0
            # beyond the end of the branch
            if Last or not First:
                OnSegment &= PV < 1

            PotentialPoints[Points] = OnSegment | PotentialPoints[Points]

        StartOnNode = BeyondNode(NodeNames[0])
        EndOnNode = BeyondNode(NodeNames[-1])

        PointsOnEdgesLeaf = PotentialPoints.copy()
        if np.isin(NodeNames[0], Leaves):
            PointsOnEdgesLeaf = PointsOnEdgesLeaf | StartOnNode
        if np.isin(NodeNames[-1], Leaves):
            PointsOnEdgesLeaf = PointsOnEdgesLeaf | EndOnNode

        AllBrInfo.append(
            dict(
                Nodes=NodeNames,
                PointsOnEdges=int(np.sum(PotentialPoints)),
                PointsOnEdgeExtBoth=int(np.sum(PotentialPoints | StartOnNode | EndOnNode)),
                PointsOnEdgesLeaf=int(np.sum(PointsOnEdgesLeaf)),
                EdgesCount=nSegments,
                EdgesLen=float(EdgLen),
                Terminal=bool(np.any(np.isin(NodeNames[[0, -1]], Leaves))),
            )
        )

    return pd.DataFrame(
        AllBrInfo,
        columns=[
            "Nodes",
            "PointsOnEdges",
            "PointsOnEdgeExtBoth",
            "PointsOnEdgesLeaf",
            "EdgesCount",
            "EdgesLen",
            "Terminal",
        ],
    )


def BranchStatistics(X, PG, TrimmingRadius=float("inf")):
    """
    Summarize how much each branch of a principal graph is supported by the data

    X numeric matrix, the data matrix
    PG dict, the ElPiGraph structure
    TrimmingRadius positive numeric, points farther than this from all the nodes are ignored

    Return
    -------
    a pandas DataFrame with one row per branch (see elpitopo.src.graphs.GetBranches) and the columns

    Nodes the ids of the nodes of the branch, in path order
    PointsOnEdges the number of points projected on the branch, excluding the points projected beyond its ends
    PointsOnEdgeExtBoth PointsOnEdges plus the points projected beyond either end
    PointsOnEdgesLeaf PointsOnEdges plus the points projected beyond the ends that are leaves
    EdgesCount the number of edges of the branch
    EdgesLen the total length of the edges of the branch
    Terminal whether one of the ends is a leaf
    """
    X = np.asarray(X, dtype=float)
    NodePositions, Edges = CheckPrincipalGraph(PG, X)
    Net = ConstructGraph(PrintGraph=PG)
    return _BranchStatistics(X, NodePositions.astype(float), Edges, Net, TrimmingRadius)


def CollapseBranches(
    X,
    PG,
    Mode="PointNumber",
    ControlPar=5,
    TrimmingRadius=float("inf"),
    verbose=False,
):
    """
    #' Filter "small" branches
    #'
    #' @param X numeric matrix, the data matrix
    #' @param PG dict, the ElPiGraph structure to filter
    #' @param Mode string, the mode used to filter the graph. "PointNumber", "PointNumber_Extrema", "PointNumber_Leaves",
    #' "EdgesNumber", and "EdgesLength" are currently implemented
    #' @param ControlPar positive numeric, the threshold below which a branch is removed
    #' @param TrimmingRadius positive numeric, the trimming radius used to control distance
    #' @param verbose boolean, should the removed branches be printed
    #'
    #' @return a dict with 2 values: Nodes (a matrix containing the new nodes positions) and Edges (a matrix describing the new edge structure)
    #'
    #' The value of ControlPar has a different interpretation depending on the value of Mode.
    #'
    #' If Mode = "PointNumber", branches with less that ControlPar points projected on the branch
    #' (points projected on the extreme points are not considered) are removed
    #'
    #' If Mode = "PointNumber_Extrema", branches with less that ControlPar points projected on the branch or the extreme
    #' points are removed
    #'
    #' If Mode = "PointNumber_Leaves", branches with less that ControlPar points projected on the branch and any leaf points
    #' (points projected on non-leaf extreme points are not considered) are removed
    #'
    #' If Mode = "EdgesNumber", branches with less that ControlPar edges are removed
    #'
    #' If Mode = "EdgesLength", branches with with a length smaller than ControlPar are removed
    #'
    #' Terminal branches (with a leaf at one end) are removed. Bridges (branching points at both ends) are
    #' fused with their ends into a single node placed at the centroid of the fused nodes.
    #' Elasticities are not computed for the new structure.
    """
    if Mode not in CollapseModes:
        raise InvalidModeError(
            "Mode " + str(Mode) + " is not defined. Use one of " + ", ".join(CollapseModes)
        )

    X = np.asarray(X, dtype=float)
    NodePositions, Edges = CheckPrincipalGraph(PG, X)
    NodePositions = NodePositions.astype(float)

    # Generate net
    Net = ConstructGraph(PrintGraph=PG)

    # all the statistics are computed before changing the structure
    AllBrInfo = _BranchStatistics(X, NodePositions, Edges, Net, TrimmingRadius)

    ToFilter = AllBrInfo[CollapseModes[Mode]].to_numpy() < ControlPar

    # Nothing to filter
    if not np.any(ToFilter):
        return dict(Edges=Edges.copy(), Nodes=NodePositions.copy())

    RemoveEdge = np.zeros(len(Edges), dtype=bool)

    # Keep track of all the nodes to fuse
    AllNodes_InternalBranches = set()

    for i in np.where(ToFilter)[0]:
        NodeNames = AllBrInfo["Nodes"].iloc[i]

        # Is it a final branch ?
        if AllBrInfo["Terminal"].iloc[i]:
            if verbose:
                print("Removing the terminal branch with nodes:", NodeNames)

            for j in range(1, len(NodeNames)):
                RemoveEdge[Net.get_eid(int(NodeNames[j - 1]), int(NodeNames[j]))] = True

        else:
            # It's a "bridge". We cannot simply remove nodes. Need to introduce a new one by "fusing" two stars
            if verbose:
                print("Removing the bridge branch with nodes:", NodeNames)

            AllNodes_InternalBranches = AllNodes_InternalBranches.union(NodeNames.tolist())

    # Get the groups of connected bridges to fuse
    Vertex_Comps = GetConnectedGroups(Net, sorted(AllNodes_InternalBranches))

    # fused nodes get the ids following the existing ones
    nNodes = len(NodePositions)
    CVet = np.arange(nNodes)
    Centroids = np.zeros((len(Vertex_Comps), NodePositions.shape[1]))
    for k, Members in enumerate(Vertex_Comps):
        CVet[Members] = nNodes + k
        Centroids[k] = np.mean(NodePositions[Members, :], axis=0)
    NodeMat = np.vstack((NodePositions, Centroids))

    # delete edges belonging to the terminal branches and redirect the others
    NewEdges = CVet[Edges[~RemoveEdge]].reshape(-1, 2)

    # remove loops and multiple edges that may have been introduced because of the collapse
    NewEdges = NewEdges[NewEdges[:, 0] != NewEdges[:, 1]]
    if len(NewEdges) > 0:
        _, FirstSeen = np.unique(np.sort(NewEdges, axis=1), axis=0, return_index=True)
        NewEdges = NewEdges[np.sort(FirstSeen)]

    # Remove empty nodes
    Kept = np.unique(NewEdges)
    Relabel = np.full(len(NodeMat), -1)
    Relabel[Kept] = np.arange(len(Kept))

    return dict(Edges=Relabel[NewEdges].reshape(-1, 2), Nodes=NodeMat[Kept, :])


def RemoveNodesbyIDs(PG, NodesToRemove):
    """
    Remove nodes from a principal graph

    PG dict, the ElPiGraph structure
    NodesToRemove the ids of the nodes to remove

    Return
    -------
    a copy of PG without the nodes, their rows and columns of the ElasticMatrix, their Mus,
    and the edges (with their Lambdas) touching them. The remaining nodes are renumbered
    keeping their order.
    """
    NodePositions, Edges = CheckPrincipalGraph(PG)
    nNodes = len(NodePositions)

    TargetPG = copy.deepcopy(PG)

    NodesToRemove = np.unique(_AsIDs(NodesToRemove))
    if len(NodesToRemove) == 0:
        return TargetPG

    if NodesToRemove[0] < 0 or NodesToRemove[-1] >= nNodes:
        raise ValueError(
            "Node ids must be in [0, " + str(nNodes) + "), got " + str(NodesToRemove)
        )

    Kept = np.ones(nNodes, dtype=bool)
    Kept[NodesToRemove] = False

    # Remap Nodes IDs, removed nodes are mapped to -1
    RemapNodeID = np.cumsum(Kept) - 1
    RemapNodeID[~Kept] = -1

    # Remove nodes
    TargetPG["NodePositions"] = NodePositions[Kept, :]
    if PG.get("ElasticMatrix") is not None:
        TargetPG["ElasticMatrix"] = np.asarray(PG["ElasticMatrix"])[np.ix_(Kept, Kept)]

    # Remove edges
    tEdges = RemapNodeID[Edges].reshape(-1, 2)
    EdgesToKeep = np.all(tEdges >= 0, axis=1)

    NewEdges = [tEdges[EdgesToKeep]]
    if len(PG["Edges"]) > 1:
        Lambdas = PG["Edges"][1]
        if Lambdas is not None:
            Lambdas = np.atleast_1d(np.asarray(Lambdas))[EdgesToKeep]
        NewEdges.append(Lambdas)
    if len(PG["Edges"]) > 2:
        # Mus are per node
        Mus = PG["Edges"][2]
        if Mus is not None:
            Mus = np.atleast_1d(np.asarray(Mus))[Kept]
        NewEdges.append(Mus)
    TargetPG["Edges"] = _SameContainer(PG["Edges"], NewEdges)

    return TargetPG
