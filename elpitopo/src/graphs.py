import numpy as np
import igraph

# Construct igraph objects -------------------------------------------------------------


def ConstructGraph(PrintGraph):
    """
    #' Generate an igraph object from an ElPiGraph structure
    #'
    #' @param PrintGraph A principal graph object
    #'
    #' @return An igraph network with one vertex per node (the "name" attribute
    #' stores the node id) and the edges in the order of PrintGraph["Edges"][0],
    #' so that igraph edge ids are the rows of the edge matrix
    """
    Edges = np.asarray(PrintGraph["Edges"][0], dtype=int).reshape(-1, 2)

    if "NodePositions" in PrintGraph:
        nNodes = len(PrintGraph["NodePositions"])
    elif len(Edges) > 0:
        nNodes = np.max(Edges) + 1
    else:
        nNodes = 0

    Net = igraph.Graph(n=nNodes, directed=False)
    Net.vs["name"] = list(range(nNodes))
    Net.add_edges(Edges.tolist())

    return Net


def GetLeaves(Net):
    """Ids of the nodes with degree 1"""
    return np.where(np.array(Net.degree(), dtype=int) == 1)[0]


# Extract structures from the graph ----------------------------------------


def GetBranches(Net):
    """
    #' Decompose a graph into branches
    #'
    #' @param Net an igraph network
    #'
    #' @return a list of node id arrays. Each array is a maximal path whose interior
    #' nodes have degree 2 and whose ends are leaves or branching points (degree > 2).
    #' Each edge belongs to exactly one branch. Paths are walked from the end with the
    #' smallest id. Loops hanging from a branching point start and end on that point,
    #' isolated loops start and end on their smallest node.
    """
    Degree = np.array(Net.degree(), dtype=int)
    EdgeList = Net.get_edgelist()
    Visited = np.zeros(Net.ecount(), dtype=bool)

    def Walk(Start, FirstEdge):
        Path = [Start]
        eid = FirstEdge
        Current = Start
        while True:
            Visited[eid] = True
            a, b = EdgeList[eid]
            Current = b if a == Current else a
            Path.append(Current)
            if Degree[Current] != 2:
                break
            eid = [e for e in Net.incident(Current) if e != eid][0]
            if Visited[eid]:
                break
        return np.array(Path, dtype=int)

    AllPaths = []

    for Start in np.where((Degree != 2) & (Degree > 0))[0].tolist():
        for eid in sorted(Net.incident(Start)):
            if not Visited[eid]:
                AllPaths.append(Walk(Start, eid))

    # what is left are connected components made only of degree 2 nodes
    for Start in range(Net.vcount()):
        Remaining = [e for e in Net.incident(Start) if not Visited[e]]
        if len(Remaining) > 0:
            AllPaths.append(Walk(Start, min(Remaining)))

    return AllPaths


def GetConnectedGroups(Net, Nodes):
    """
    #' Group nodes by connectivity
    #'
    #' @param Net an igraph network
    #' @param Nodes the ids of the nodes to group
    #'
    #' @return a list of sorted node id arrays, one per connected component of the
    #' subgraph of Net induced by Nodes
    """
    Nodes = np.unique(np.asarray(Nodes, dtype=int))
    if len(Nodes) == 0:
        return []

    tNet = Net.induced_subgraph(Nodes.tolist())
    Names = np.array(tNet.vs["name"], dtype=int)
    Membership = np.array(tNet.components().membership)

    return [np.sort(Names[Membership == i]) for i in np.unique(Membership)]
