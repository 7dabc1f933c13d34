"""
Circuit assembly and structural simplification.

A :class:`Circuit` collects components and the connections between their
pins. :meth:`Circuit.structural_simplify` turns the resulting
differential-algebraic system into a minimal ODE system: connection and
alias equations are eliminated, the algebraic equations are solved for the
algebraic unknowns with sympy, and the solutions are substituted into the
state equations.
"""

from __future__ import annotations

import itertools
from typing import Dict, List, Optional, Sequence, Tuple

import sympy as sp

from .components import Component, Pin, t
from .system import ReducedSystem


class StructuralError(ValueError):
    """Raised when a circuit cannot be reduced to an explicit ODE system."""


class Circuit:
    """
    Acausal network of lumped elements.

    Parameters
    ----------
    name : str
        Name of the model
    """

    def __init__(self, name: str = "circuit"):
        self.name = name
        self.components: Dict[str, Component] = {}
        self.connections: List[List[Pin]] = []

    def add(self, *components: Component) -> "Circuit":
        for comp in components:
            if comp.name in self.components:
                raise ValueError(f"Duplicate component name: {comp.name}")
            self.components[comp.name] = comp
        return self

    def _check_pin(self, pin: Pin):
        comp = self.components.get(pin.owner)
        if comp is None or comp.pins.get(pin.name) is not pin:
            raise ValueError(f"{pin!r} does not belong to a component of this circuit")

    def connect(self, *pins: Pin) -> "Circuit":
        """
        Join pins into one node: equal pressures, flows summing to zero.

        Connecting a pin that already belongs to a node merges the nodes.
        """
        if len(pins) < 2:
            raise ValueError("connect() needs at least two pins")
        for pin in pins:
            self._check_pin(pin)
        node = list(dict.fromkeys(pins))
        keep = []
        for existing in self.connections:
            if any(p in existing for p in node):
                node = existing + [p for p in node if p not in existing]
            else:
                keep.append(existing)
        keep.append(node)
        self.connections = keep
        return self

    # ---- DAE assembly

    def _collect(self):
        states, rhs, unknowns, equations = [], {}, [], []
        parameters, initial = {}, {}
        for comp in self.components.values():
            states += comp.states
            rhs.update(comp.rhs)
            unknowns += comp.unknowns
            equations += comp.equations
            parameters.update(comp.parameters)
            initial.update(comp.initial)

        connected = set()
        for node in self.connections:
            connected.update(node)
            first = node[0]
            equations += [pin.p - first.p for pin in node[1:]]
            equations.append(sp.Add(*[pin.q for pin in node]))

        # open pins carry no flow
        for comp in self.components.values():
            for pin in comp.pins.values():
                if pin not in connected:
                    equations.append(pin.q)
        return states, rhs, unknowns, equations, parameters, initial

    def equations(self) -> List[str]:
        """Full differential-algebraic system as readable strings."""
        states, rhs, _, equations, _, _ = self._collect()
        lines = [f"d({x})/dt = {rhs[x]}" for x in states]
        lines += [f"0 = {eq}" for eq in equations]
        return lines

    def structural_simplify(self) -> ReducedSystem:
        """
        Reduce the circuit to a minimal explicit ODE system.

        Returns
        -------
        ReducedSystem
            States, right-hand sides and the observed (eliminated) variables

        Raises
        ------
        StructuralError
            If the equation count does not match the unknowns, an equation
            constrains the states only, or the algebraic part has no unique
            solution.
        """
        if not self.components:
            raise StructuralError("Circuit has no components")
        states, rhs, unknowns, equations, parameters, initial = self._collect()
        missing = [x for x in states if x not in rhs]
        if missing:
            raise StructuralError(f"States without dynamics: {missing}")

        solution = eliminate(equations, unknowns)

        reduced = []
        for x in states:
            expr = rhs[x].xreplace(solution)
            left = expr.free_symbols & set(unknowns)
            if left:
                raise StructuralError(f"d({x})/dt still depends on {sorted(map(str, left))}")
            reduced.append(expr)

        observed = {u: solution[u] for u in unknowns}
        return ReducedSystem(
            name=self.name,
            t=t,
            states=states,
            rhs=reduced,
            observed=observed,
            parameters=parameters,
            initial=initial,
        )


def _as_alias(eq: sp.Expr, unknowns) -> Optional[Tuple[sp.Symbol, sp.Expr]]:
    """Match ``a - b`` or ``a + b`` between two unknowns; return (b, expr of a)."""
    terms = sp.Add.make_args(eq)
    if len(terms) != 2:
        return None
    pairs = []
    for term in terms:
        coeff, sym = term.as_coeff_Mul()
        if sym not in unknowns or coeff not in (1, -1):
            return None
        pairs.append((coeff, sym))
    (c1, a), (c2, b) = sorted(pairs, key=lambda cs: _rank(cs[1]))
    # c1*a + c2*b = 0  ->  b = -c1/c2 * a
    return b, -c1 * c2 * a


def _rank(sym: sp.Symbol):
    # pin variables are eliminated in favour of component variables
    name = sym.name
    return (name.count("_"), name)


def eliminate(equations: Sequence[sp.Expr], unknowns: Sequence[sp.Symbol]) -> Dict[sp.Symbol, sp.Expr]:
    """
    Solve the algebraic equations for the algebraic unknowns.

    Alias equations are removed first, then unknowns that enter an equation
    linearly and alone are isolated one at a time with
    :func:`sympy.solve_linear`; whatever remains is solved as a block with
    :func:`sympy.solve`, one valve state at a time when valves sit inside
    the block.

    Returns
    -------
    dict
        Every unknown mapped to an expression in states, parameters and time
    """
    if len(equations) != len(unknowns):
        raise StructuralError(
            f"{len(equations)} algebraic equations for {len(unknowns)} unknowns"
        )
    open_set = set(unknowns)

    # alias elimination
    alias: Dict[sp.Symbol, sp.Expr] = {}
    pending = list(equations)
    changed = True
    while changed:
        changed = False
        rest = []
        for eq in pending:
            eq = eq.xreplace(alias) if alias else eq
            match = _as_alias(eq, open_set)
            if match is not None:
                var, expr = match
                alias = {k: v.xreplace({var: expr}) for k, v in alias.items()}
                alias[var] = expr
                open_set.discard(var)
                changed = True
                continue
            rest.append(eq)
        pending = rest

    # ordered solving
    solved: Dict[sp.Symbol, sp.Expr] = {}
    progress = True
    while pending and progress:
        progress = False
        for i, eq in enumerate(pending):
            involved = eq.free_symbols & open_set
            if not involved:
                _reject(eq)
            if len(involved) != 1:
                continue
            var = involved.pop()
            sym, value = sp.solve_linear(eq, symbols=[var])
            if sym != var:
                continue
            solved[var] = value
            open_set.discard(var)
            pending = [e.xreplace({var: value}) for j, e in enumerate(pending) if j != i]
            progress = True
            break

    # coupled block
    if pending:
        for eq in pending:
            if not eq.free_symbols & open_set:
                _reject(eq)
        block = sorted(open_set, key=lambda s: s.name)
        solved.update(_solve_block(pending, block))
        open_set.clear()

    if open_set:
        raise StructuralError(f"Unresolved unknowns: {sorted(s.name for s in open_set)}")

    solution = dict(solved)
    for var, expr in alias.items():
        solution[var] = expr.xreplace(solved)
    return solution


def _solve(equations, block) -> List[Dict[sp.Symbol, sp.Expr]]:
    """:func:`sympy.solve` with every remaining ``Piecewise`` held fixed."""
    frozen = {pw: sp.Dummy() for eq in equations for pw in eq.atoms(sp.Piecewise)}
    back = {d: pw for pw, d in frozen.items()}
    try:
        sols = sp.solve([eq.xreplace(frozen) for eq in equations], block, dict=True)
    except NotImplementedError as exc:
        raise StructuralError(f"Cannot solve algebraic block: {exc}") from exc
    return [{k: v.xreplace(back) for k, v in sol.items()} for sol in sols]


def _unique(equations, block) -> Optional[Dict[sp.Symbol, sp.Expr]]:
    """Unique solution of ``equations`` for ``block``, or None."""
    sols = _solve(equations, block)
    if len(sols) != 1 or set(sols[0]) != set(block):
        return None
    if any(v.free_symbols & set(block) for v in sols[0].values()):
        return None
    return sols[0]


def _solve_block(pending, block) -> Dict[sp.Symbol, sp.Expr]:
    """
    Solve a coupled block, branch by branch when it contains switches.

    A switch is a ``Piecewise`` depending on block unknowns (a valve). Every
    combination of switch branches is solved as a plain system. When a
    combination leaves the block undetermined (closed valves in series), the
    valves are pinned at their opening threshold one by one until it is
    determined. Inconsistent combinations are dropped; the rest are joined
    into one ``Piecewise`` per unknown, guarded by the branch conditions
    evaluated at that combination's solution. The last surviving combination
    is the fallback.
    """
    names = [s.name for s in block]
    unknowns = set(block)
    switches = sorted(
        {pw for eq in pending for pw in eq.atoms(sp.Piecewise) if pw.free_symbols & unknowns},
        key=sp.default_sort_key,
    )
    if not switches:
        solution = _unique(pending, block)
        if solution is None:
            raise StructuralError(f"No unique solution for the algebraic block in {names}")
        return solution

    thresholds = [
        pw.args[0].cond.lhs - pw.args[0].cond.rhs
        for pw in switches
        if isinstance(pw.args[0].cond, sp.core.relational.Relational)
    ]
    candidates = []
    for choice in itertools.product(*[range(len(pw.args)) for pw in switches]):
        picked, guards = {}, []
        for pw, k in zip(switches, choice):
            branch = pw.args[k]
            picked[pw] = branch.expr
            guards.append(sp.And(branch.cond, *[sp.Not(prev.cond) for prev in pw.args[:k]]))
        equations = [eq.xreplace(picked) for eq in pending]
        solution = _unique(equations, block)
        for edge in thresholds:
            if solution is not None:
                break
            trial = equations + [edge]
            if _solve(trial, block):
                equations = trial
                solution = _unique(equations, block)
        if solution is None:
            continue
        guard = sp.And(*guards).xreplace(solution)
        if guard == sp.false:
            continue
        candidates.append((solution, guard))
        if guard == sp.true:
            break

    if not candidates:
        raise StructuralError(f"No consistent valve state for the piecewise algebraic block in {names}")
    if len(candidates) == 1:
        return candidates[0][0]
    *head, (last, _) = candidates
    return {
        u: sp.Piecewise(*[(sol[u], guard) for sol, guard in head], (last[u], True))
        for u in block
    }


def _reject(eq: sp.Expr):
    if eq == 0:
        raise StructuralError("Redundant equation in circuit")
    if eq.free_symbols:
        raise StructuralError(
            f"Equation constrains states only (higher-index system): 0 = {eq}"
        )
    raise StructuralError(f"Inconsistent equation: 0 = {eq}")
