import pytest
import numpy as np
import elpitopo


def check_structure(Result):
    Edges = Result["Edges"]
    assert Edges.shape[1] == 2
    assert not np.any(Edges[:, 0] == Edges[:, 1])
    Degree = np.bincount(Edges.flatten(), minlength=len(Result["Nodes"]))
    assert len(Degree) == len(Result["Nodes"])
    assert np.all(Degree > 0)


def test_nothing_to_collapse(path_pg, path_data):
    Result = elpitopo.CollapseBranches(path_data, path_pg, Mode="EdgesNumber", ControlPar=2)

    np.testing.assert_array_equal(Result["Edges"], path_pg["Edges"][0])
    np.testing.assert_array_equal(Result["Nodes"], path_pg["NodePositions"])
    assert Result["Nodes"] is not path_pg["NodePositions"]


def test_whole_path_removed(path_pg, path_data):
    Result = elpitopo.CollapseBranches(path_data, path_pg, Mode="EdgesNumber", ControlPar=5)

    assert Result["Nodes"].shape == (0, 2)
    assert Result["Edges"].shape == (0, 2)


def test_terminal_branch_removed(tree_pg, tree_data):
    Result = elpitopo.CollapseBranches(tree_data, tree_pg, Mode="PointNumber", ControlPar=1)

    check_structure(Result)
    np.testing.assert_array_equal(Result["Edges"], [[0, 1], [1, 2], [0, 3], [3, 4]])
    np.testing.assert_array_equal(Result["Nodes"], tree_pg["NodePositions"][:5])


def test_modes_differ_on_extrema(tree_pg, tree_data):
    Result = elpitopo.CollapseBranches(tree_data, tree_pg, Mode="PointNumber", ControlPar=21)
    assert len(Result["Nodes"]) == 0

    for Mode in ["PointNumber_Extrema", "PointNumber_Leaves"]:
        Result = elpitopo.CollapseBranches(tree_data, tree_pg, Mode=Mode, ControlPar=21)
        np.testing.assert_array_equal(Result["Edges"], [[0, 1], [1, 2], [0, 3], [3, 4]])


def test_bridge_is_fused(dumbbell_pg):
    X = dumbbell_pg["NodePositions"]
    Result = elpitopo.CollapseBranches(X, dumbbell_pg, Mode="EdgesLength", ControlPar=2.5)

    check_structure(Result)
    np.testing.assert_array_equal(
        Result["Edges"],
        [[8, 0], [0, 1], [8, 2], [2, 3], [8, 4], [4, 5], [8, 6], [6, 7]],
    )
    np.testing.assert_array_equal(Result["Nodes"][:8], dumbbell_pg["NodePositions"][3:])
    np.testing.assert_allclose(Result["Nodes"][8], [1, 0])


def test_loop_is_fused():
    NodePositions = np.array(
        [[0, 0], [1, 0], [2, 0], [3, 0], [4, 0], [5, 1], [5, -1]], dtype=float
    )
    Edges = np.array([[0, 1], [1, 2], [2, 3], [3, 4], [4, 5], [5, 6], [6, 4]])
    PG = elpitopo.utils.makePrincipalGraph(NodePositions, Edges)

    Result = elpitopo.CollapseBranches(NodePositions, PG, Mode="EdgesNumber", ControlPar=4)

    check_structure(Result)
    np.testing.assert_array_equal(Result["Edges"], [[0, 1], [1, 2], [2, 3], [3, 4]])
    np.testing.assert_allclose(Result["Nodes"][:4], NodePositions[:4])
    np.testing.assert_allclose(Result["Nodes"][4], [14 / 3, 0])


def test_adjacent_bridges_share_one_node():
    # junctions 1, 3 and 5 joined by the bridges 1 - 2 - 3 and 3 - 4 - 5, long terminal branches
    NodePositions = np.array(
        [
            [-4, 0],
            [1, 0],
            [2, 0],
            [3, 0],
            [4, 0],
            [5, 0],
            [10, 0],
            [1, 5],
            [3, 5],
            [5, 5],
        ],
        dtype=float,
    )
    Edges = np.array(
        [[0, 1], [1, 2], [2, 3], [3, 4], [4, 5], [5, 6], [1, 7], [3, 8], [5, 9]]
    )
    PG = elpitopo.utils.makePrincipalGraph(NodePositions, Edges)

    Stats = elpitopo.BranchStatistics(NodePositions, PG)
    Bridges = Stats.loc[~Stats["Terminal"]]
    assert len(Stats) == 7
    np.testing.assert_array_equal(Bridges["EdgesCount"], [2, 2])

    Result = elpitopo.CollapseBranches(NodePositions, PG, Mode="EdgesLength", ControlPar=3)

    check_structure(Result)
    np.testing.assert_array_equal(Result["Edges"], [[0, 5], [5, 1], [5, 2], [5, 3], [5, 4]])
    np.testing.assert_array_equal(Result["Nodes"][:5], NodePositions[[0, 6, 7, 8, 9]])
    np.testing.assert_allclose(Result["Nodes"][5], [3, 0])


def test_invalid_mode(path_pg, path_data):
    with pytest.raises(elpitopo.InvalidModeError):
        elpitopo.CollapseBranches(path_data, path_pg, Mode="PointCount")


def test_branch_statistics(tree_pg, tree_data):
    Stats = elpitopo.BranchStatistics(tree_data, tree_pg)

    assert len(Stats) == 3
    np.testing.assert_array_equal(Stats["Nodes"].iloc[0], [0, 1, 2])
    np.testing.assert_array_equal(Stats["Nodes"].iloc[1], [0, 3, 4])
    np.testing.assert_array_equal(Stats["Nodes"].iloc[2], [0, 5, 6])
    np.testing.assert_array_equal(Stats["PointsOnEdges"], [20, 20, 0])
    np.testing.assert_array_equal(Stats["PointsOnEdgeExtBoth"], [25, 25, 0])
    np.testing.assert_array_equal(Stats["PointsOnEdgesLeaf"], [25, 25, 0])
    np.testing.assert_array_equal(Stats["EdgesCount"], [2, 2, 2])
    np.testing.assert_allclose(Stats["EdgesLen"], [2, 2, 2])
    assert Stats["Terminal"].all()


def test_branch_statistics_ignore_edge_direction(tree_pg, tree_data):
    Edges = tree_pg["Edges"][0].copy()
    Edges[:2] = Edges[:2, ::-1]
    PG = dict(NodePositions=tree_pg["NodePositions"], Edges=[Edges, tree_pg["Edges"][1]])

    Stats = elpitopo.BranchStatistics(tree_data, PG)

    np.testing.assert_array_equal(Stats["Nodes"].iloc[0], [0, 1, 2])
    np.testing.assert_array_equal(Stats["PointsOnEdges"], [20, 20, 0])
    np.testing.assert_array_equal(Stats["PointsOnEdgeExtBoth"], [25, 25, 0])


def test_branch_statistics_trimmed(tree_pg, tree_data):
    Stats = elpitopo.BranchStatistics(tree_data, tree_pg, TrimmingRadius=0.01)

    np.testing.assert_array_equal(Stats["PointsOnEdges"], [0, 0, 0])
    np.testing.assert_array_equal(Stats["PointsOnEdgeExtBoth"], [0, 0, 0])


def test_points_past_a_junction(fan_pg):
    # one point behind the junction 0, one point past the leaf 2
    X = np.array([[-0.4, 0.0], [1.3, 0.0]])
    Stats = elpitopo.BranchStatistics(X, fan_pg)

    np.testing.assert_array_equal(Stats["PointsOnEdges"], [0, 0, 0])
    np.testing.assert_array_equal(Stats["PointsOnEdgeExtBoth"], [1, 2, 1])
    np.testing.assert_array_equal(Stats["PointsOnEdgesLeaf"], [0, 1, 0])

    Result = elpitopo.CollapseBranches(X, fan_pg, Mode="PointNumber_Extrema", ControlPar=1)
    np.testing.assert_array_equal(Result["Edges"], fan_pg["Edges"][0])

    Result = elpitopo.CollapseBranches(X, fan_pg, Mode="PointNumber_Leaves", ControlPar=1)
    np.testing.assert_array_equal(Result["Edges"], [[0, 1]])
    np.testing.assert_array_equal(Result["Nodes"], [[0, 0], [1, 0]])


def test_single_edge_branch():
    PG = elpitopo.utils.makePrincipalGraph(np.array([[0.0, 0.0], [1.0, 0.0]]), [[0, 1]])
    X = np.c_[[-0.5, 0.4, 1.5], np.zeros(3)]

    Stats = elpitopo.BranchStatistics(X, PG)

    assert len(Stats) == 1
    assert Stats["PointsOnEdges"].iloc[0] == 1
    assert Stats["PointsOnEdgeExtBoth"].iloc[0] == 3
    assert Stats["PointsOnEdgesLeaf"].iloc[0] == 3
