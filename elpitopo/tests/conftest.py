import pytest
import numpy as np
import elpitopo


@pytest.fixture
def path_pg():
    # 0 - 1 - 2 - 3 - 4 along the x axis
    NodePositions = np.c_[np.arange(5.0), np.zeros(5)]
    Edges = np.array([[0, 1], [1, 2], [2, 3], [3, 4]])
    return elpitopo.utils.makePrincipalGraph(
        NodePositions, Edges, Lambda=np.array([0.1, 0.2, 0.3, 0.4]), Mu=0.05
    )


@pytest.fixture
def path_data():
    # uniform on [-0.95, 4.95], no point is equidistant from two nodes
    return np.c_[np.linspace(-0.95, 4.95, 60), np.zeros(60)]


@pytest.fixture
def tree_pg():
    # junction 0, arm A along +x (1, 2), arm B along +y (3, 4), arm C along -x (5, 6)
    NodePositions = np.array(
        [[0, 0], [1, 0], [2, 0], [0, 1], [0, 2], [-1, 0], [-2, 0]], dtype=float
    )
    Edges = np.array([[0, 1], [1, 2], [0, 3], [3, 4], [0, 5], [5, 6]])
    return elpitopo.utils.makePrincipalGraph(NodePositions, Edges)


@pytest.fixture
def tree_data():
    # data on arms A and B only, running 0.45 past the leaves
    t = np.linspace(0.05, 2.45, 25)
    return np.vstack((np.c_[t, np.zeros(25)], np.c_[np.zeros(25), t]))


@pytest.fixture
def dumbbell_pg():
    # junctions 0 and 2 joined by the bridge 0 - 1 - 2, two arms on each junction
    NodePositions = np.array(
        [
            [0, 0],
            [1, 0],
            [2, 0],
            [-1, 1],
            [-2, 2],
            [-1, -1],
            [-2, -2],
            [3, 1],
            [4, 2],
            [3, -1],
            [4, -2],
        ],
        dtype=float,
    )
    Edges = np.array(
        [[0, 1], [1, 2], [0, 3], [3, 4], [0, 5], [5, 6], [2, 7], [7, 8], [2, 9], [9, 10]]
    )
    return elpitopo.utils.makePrincipalGraph(NodePositions, Edges)


@pytest.fixture
def fan_pg():
    # junction 0 with the leaves 1, 2 and 3
    NodePositions = np.array([[0, 0], [1, 1], [1, 0], [1, -1]], dtype=float)
    Edges = np.array([[0, 1], [0, 2], [0, 3]])
    return elpitopo.utils.makePrincipalGraph(NodePositions, Edges)
