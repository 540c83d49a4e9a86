'''Gravitree: hierarchical Keplerian orbit propagation
SolarSystem class definition'''

import math
import warnings
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple
import numpy as np
from .config import config
from .vector import Vector3D
from .position import Position
from .body import Body
from .orbital_state import OrbitalState
from .exceptions import DuplicateBodyError, InvalidOperationError, UnknownBodyError


@dataclass
class _Node:
    """Tree entry: a body, its orbit about the parent, and child ids."""
    body: Body
    state: Optional[OrbitalState] = None
    parent: Optional[str] = None
    children: List[str] = field(default_factory=list)


class SolarSystem:
    """
    Hierarchy of bodies, each following a Keplerian orbit about its parent.

    The root body sits at the origin of the system frame and has no orbit.
    Every other body stores an OrbitalState relative to its parent, so a
    moon orbits its planet which in turn orbits the star. Nodes are kept in
    a table keyed by Body.id; parent and child links are ids into that
    table.

    The system owns its orbital states. States passed to ``add_body`` are
    copied, while ``get_state`` hands out the live state so callers can
    propagate it with ``set_time``.

    Parameters
    ----------
    root : Body
        The central body (e.g. the star)

    Raises
    ------
    TypeError
        If root is not a Body, or on any attempt to copy the system

    Examples
    --------
    >>> sun = Body("sun", 1.9885e30)
    >>> system = SolarSystem(sun)
    >>> system.add_body(Body("earth", 5.97237e24), "sun",
    ...                 position=(0, 1.47095e11, 0), velocity=(3.029e4, 0, 0))
    >>> system.get_relative_to("sun")
    [(Body(id='sun', ...), Vector3D(0.0, 0.0, 0.0)), (Body(id='earth', ...), ...)]
    """

    # ========== CONSTRUCTION ==========
    def __init__(self, root: Body):
        if not isinstance(root, Body):
            raise TypeError(f"root must be a Body, got {type(root)}")
        self._root_id = root.id
        self._nodes: Dict[str, _Node] = {root.id: _Node(root)}
        self._time = 0.0

    def __copy__(self):
        raise TypeError("SolarSystem cannot be copied")

    def __deepcopy__(self, memo):
        raise TypeError("SolarSystem cannot be copied")

    # ========== CLOCK ==========
    @property
    def time(self) -> float:
        """Internal clock [s]"""
        return self._time

    def tick(self, seconds: float):
        """
        Advance the internal clock.

        Orbital states are not moved; propagate them individually through
        ``get_state(body_id).set_time(t)``.
        """
        seconds = float(seconds)
        if not math.isfinite(seconds):
            raise ValueError(f"Tick must be finite, got {seconds}")
        self._time += seconds

    # ========== TREE EDITING ==========
    def add_body(self, body: Body, parent: Optional[str] = None, *,
                 state: Optional[OrbitalState] = None,
                 position=None, velocity=None):
        """
        Insert a body as the last child of a parent.

        Either a precomputed ``state`` or a ``position``/``velocity`` pair
        must be given. Vectors are relative to ``parent``; when ``parent``
        is None they are relative to the root and the parent becomes the
        deepest body whose sphere of influence contains the position.

        Parameters
        ----------
        body : Body
            Body to insert; its id must be unused
        parent : str, optional
            Id of the parent body
        state : OrbitalState, optional
            Orbit about the parent, stored as a copy
        position, velocity : Vector3D or array-like, optional
            State vectors [m, m/s]

        Raises
        ------
        UnknownBodyError
            If the parent id is absent
        DuplicateBodyError
            If the body id is already present
        ValueError
            If neither or both of state and vectors are given
        DegenerateOrbitError
            If the vectors do not define an orbit

        Warns
        -----
        UserWarning
            If the state's orbit assumes a parent mass other than the
            parent body's
        """
        if not isinstance(body, Body):
            raise TypeError(f"body must be a Body, got {type(body)}")
        has_vectors = position is not None or velocity is not None
        if state is None and not has_vectors:
            raise ValueError("add_body requires either state or position and velocity")
        if state is not None and has_vectors:
            raise ValueError("add_body accepts state or position/velocity, not both")
        if has_vectors and (position is None or velocity is None):
            raise ValueError("position and velocity must be given together")

        if parent is not None:
            parent_node = self._node(parent)
        if body.id in self._nodes:
            raise DuplicateBodyError(body.id)

        if state is not None:
            if not isinstance(state, OrbitalState):
                raise TypeError(f"state must be an OrbitalState, got {type(state)}")
            if parent is None:
                parent_node = self._nodes[self._root_id]
            state = state.copy()
            if not np.isclose(state.orbit.parent_mass, parent_node.body.mass,
                              rtol=config.EQUALITY_RTOL, atol=0.0):
                warnings.warn(
                    f"Orbit of '{body.id}' assumes a parent mass of "
                    f"{state.orbit.parent_mass:.6e} kg but '{parent_node.body.id}' "
                    f"has {parent_node.body.mass:.6e} kg"
                )
        else:
            position = Vector3D.coerce(position)
            velocity = Vector3D.coerce(velocity)
            if parent is None:
                # re-express root-relative vectors about the dominant body
                absolute = Position.from_vector(position)
                parent_node = self._nodes[self.find_dominant_body(absolute).id]
                parent_position, parent_velocity = self.absolute_state(parent_node.body.id)
                position = absolute - parent_position
                velocity = velocity - parent_velocity
            state = OrbitalState.from_vectors(position, velocity, parent_node.body.mass)

        self._nodes[body.id] = _Node(body, state, parent_node.body.id)
        parent_node.children.append(body.id)

    def remove_body(self, body_id: str):
        """
        Remove a body and re-parent its children onto its parent.

        Each child keeps its position and velocity: its new orbit is derived
        from the summed offsets against the grandparent's mass. All new
        orbits are computed before the tree is touched, so a failure leaves
        the system unchanged.

        Raises
        ------
        UnknownBodyError
            If the id is absent
        InvalidOperationError
            If the id is the root
        DegenerateOrbitError
            If a child's state relative to the grandparent is not an orbit
        """
        node = self._node(body_id)
        if node.parent is None:
            raise InvalidOperationError(f"Cannot remove the root body '{body_id}'")
        grandparent = self._nodes[node.parent]

        offset_position = node.state.position()
        offset_velocity = node.state.velocity()
        new_states = []
        for child_id in node.children:
            child = self._nodes[child_id]
            new_states.append(OrbitalState.from_vectors(
                offset_position + child.state.position(),
                offset_velocity + child.state.velocity(),
                grandparent.body.mass))

        for child_id, new_state in zip(node.children, new_states):
            child = self._nodes[child_id]
            child.state = new_state
            child.parent = grandparent.body.id
            grandparent.children.append(child_id)
        grandparent.children.remove(body_id)
        del self._nodes[body_id]

    # ========== LOOKUP ==========
    def _node(self, body_id: str) -> _Node:
        try:
            return self._nodes[body_id]
        except (KeyError, TypeError):
            raise UnknownBodyError(body_id) from None

    @property
    def root(self) -> Body:
        return self._nodes[self._root_id].body

    def get_body(self, body_id: str) -> Body:
        """Body stored under an id."""
        return self._node(body_id).body

    def get_state(self, body_id: str) -> Optional[OrbitalState]:
        """Live orbital state of a body about its parent (None for the root)."""
        return self._node(body_id).state

    def get_parent(self, body_id: str) -> Optional[Body]:
        """Parent body (None for the root)."""
        node = self._node(body_id)
        if node.parent is None:
            return None
        return self._nodes[node.parent].body

    def get_children(self, body_id: str) -> List[Body]:
        """Children in insertion order."""
        return [self._nodes[child_id].body for child_id in self._node(body_id).children]

    def __len__(self):
        return len(self._nodes)

    def __contains__(self, body_id):
        return body_id in self._nodes

    def __iter__(self) -> Iterator[Body]:
        return (node.body for node in self._nodes.values())

    # ========== RELATIVE GEOMETRY ==========
    def get_relative_to(self, body_id: str) -> List[Tuple[Body, Vector3D]]:
        """
        Positions of every body relative to one body.

        Only translation is applied; the axes are those shared by every
        orbit frame. Offsets are summed as Position values so that large
        interplanetary distances keep sub-meter precision.

        Parameters
        ----------
        body_id : str
            Id of the reference body

        Returns
        -------
        list of (Body, Vector3D)
            One entry per body in the system, the reference body at the
            zero vector

        Raises
        ------
        UnknownBodyError
            If the id is absent
        """
        node = self._node(body_id)
        result = [(node.body, Vector3D())]
        self._collect_subtree(node, Position(), result)

        # climb to the root, picking up each ancestor and its other branches
        offset = Position()
        current = node
        while current.parent is not None:
            parent = self._nodes[current.parent]
            offset = offset - current.state.position()
            result.append((parent.body, offset.to_vector()))
            for sibling_id in parent.children:
                if sibling_id == current.body.id:
                    continue
                sibling = self._nodes[sibling_id]
                sibling_offset = offset + sibling.state.position()
                result.append((sibling.body, sibling_offset.to_vector()))
                self._collect_subtree(sibling, sibling_offset, result)
            current = parent
        return result

    def _collect_subtree(self, node: _Node, offset: Position, result: list):
        for child_id in node.children:
            child = self._nodes[child_id]
            child_offset = offset + child.state.position()
            result.append((child.body, child_offset.to_vector()))
            self._collect_subtree(child, child_offset, result)

    def relative_table(self, body_id: str):
        """
        ``get_relative_to`` as a DataFrame.

        Returns
        -------
        pd.DataFrame
            Indexed by body id with columns x, y, z, distance [m]
        """
        # pandas isn't needed unless this function is used
        try:
            import pandas as pd
        except ImportError:
            raise ImportError("pandas required for relative_table()")

        rows = [{'id': body.id, 'x': offset.x, 'y': offset.y, 'z': offset.z,
                 'distance': offset.magnitude()}
                for body, offset in self.get_relative_to(body_id)]
        return pd.DataFrame(rows, columns=['id', 'x', 'y', 'z', 'distance']).set_index('id')

    def absolute_state(self, body_id: str) -> Tuple[Position, Vector3D]:
        """
        Position and velocity of a body relative to the root.

        Returns
        -------
        tuple of (Position, Vector3D)
        """
        node = self._node(body_id)
        position = Position()
        velocity = Vector3D()
        while node.parent is not None:
            position = position + node.state.position()
            velocity = velocity + node.state.velocity()
            node = self._nodes[node.parent]
        return position, velocity

    def sphere_of_influence(self, body_id: str) -> float:
        """
        Laplace sphere of influence radius |a| (m/M)^(2/5) [m].

        The root's sphere of influence is infinite.
        """
        node = self._node(body_id)
        if node.parent is None:
            return math.inf
        orbit = node.state.orbit
        return abs(orbit.semimajor_axis) * (node.body.mass / orbit.parent_mass) ** 0.4

    def find_dominant_body(self, position) -> Body:
        """
        Deepest body whose sphere of influence contains a root-relative position.

        Starting at the root, descend into the closest child whose sphere of
        influence contains the point until no child does.

        Parameters
        ----------
        position : Position, Vector3D or array-like
            Point relative to the root [m]

        Returns
        -------
        Body
        """
        if not isinstance(position, Position):
            position = Position.from_vector(position)
        node = self._nodes[self._root_id]
        node_position = Position()
        while True:
            best = None
            for child_id in node.children:
                child = self._nodes[child_id]
                child_position = node_position + child.state.position()
                distance = position.distance(child_position)
                if distance < self.sphere_of_influence(child_id) and (
                        best is None or distance < best[0]):
                    best = (distance, child, child_position)
            if best is None:
                return node.body
            _, node, node_position = best

    def __repr__(self):
        return f"SolarSystem(root={self._root_id!r}, bodies={len(self._nodes)}, time={self._time})"

    def __str__(self):
        lines = [f"Solar System (t = {self._time:.3f} s):"]

        def describe(body_id, depth):
            node = self._nodes[body_id]
            line = f"{'  ' * (depth + 1)}{body_id} ({node.body.mass:.4e} kg)"
            if node.state is not None:
                line += f", r = {node.state.distance():.6e} m"
            lines.append(line)
            for child_id in node.children:
                describe(child_id, depth + 1)

        describe(self._root_id, 0)
        return "\n".join(lines)
