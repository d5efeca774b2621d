"""Minimal acyclic transducer from phrase keys to encoded id lists.

Keys are consumed one code point per arc. Outputs live on final states, so
two states are equivalent only when they accept the same suffixes with the
same outputs. Construction is the incremental sorted-input algorithm: each
new key freezes the part of the previous key's path it no longer shares, and
frozen states are merged with an equivalent registered state when one exists.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from synonym_graph.codec import read_vint, write_vint
from synonym_graph.exceptions import BuildError, DictionaryLoadError

_FINAL = 0x01


class _Node:
    __slots__ = ("arcs", "final", "output", "number")

    def __init__(self) -> None:
        self.arcs: dict[str, _Node] = {}
        self.final = False
        self.output: bytes | None = None
        self.number = -1

    def signature(self) -> tuple:
        return (
            self.final,
            self.output,
            tuple((label, child.number) for label, child in self.arcs.items()),
        )


class TransducerBuilder:
    """Accepts ``(key, output)`` pairs in strictly increasing key order."""

    def __init__(self) -> None:
        self._root = _Node()
        self._path: list[_Node] = [self._root]
        self._labels: list[str] = []
        self._last: str | None = None
        self._registry: dict[tuple, _Node] = {}
        self._states: list[_Node] = []
        self._count = 0

    def __len__(self) -> int:
        return self._count

    def add(self, key: str, output: bytes) -> None:
        """Insert ``key``.

        Raises:
            BuildError: If ``key`` is empty or not greater than the last key.
        """
        if not key:
            raise BuildError("empty key")
        if self._last is not None and key <= self._last:
            raise BuildError(
                f"keys must be added in sorted order: {key!r} after {self._last!r}"
            )

        prefix = 0
        if self._last is not None:
            limit = min(len(key), len(self._last))
            while prefix < limit and key[prefix] == self._last[prefix]:
                prefix += 1
        self._freeze_tail(prefix)

        for ch in key[prefix:]:
            node = _Node()
            self._path[-1].arcs[ch] = node
            self._path.append(node)
            self._labels.append(ch)
        tail = self._path[-1]
        tail.final = True
        tail.output = bytes(output)

        self._last = key
        self._count += 1

    def _freeze_tail(self, depth: int) -> None:
        while len(self._path) - 1 > depth:
            child = self._path.pop()
            label = self._labels.pop()
            self._path[-1].arcs[label] = self._register(child)

    def _register(self, node: _Node) -> _Node:
        sig = node.signature()
        existing = self._registry.get(sig)
        if existing is not None:
            return existing
        node.number = len(self._states)
        self._states.append(node)
        self._registry[sig] = node
        return node

    def finish(self) -> Transducer | None:
        """Freeze the automaton; ``None`` when no key was added."""
        if self._count == 0:
            return None
        self._freeze_tail(0)
        root = self._register(self._root)

        arcs = [
            {label: child.number for label, child in node.arcs.items()}
            for node in self._states
        ]
        outputs = [node.output if node.final else None for node in self._states]
        return Transducer(arcs, outputs, root.number, self._count)


@dataclass(frozen=True, slots=True, eq=False)
class Transducer:
    """Read-only automaton; safe to query from any number of threads."""

    arcs: list[dict[str, int]]
    outputs: list[bytes | None]
    root: int
    key_count: int

    def __len__(self) -> int:
        return self.key_count

    @property
    def num_states(self) -> int:
        return len(self.arcs)

    def get(self, key: str) -> bytes | None:
        state = self.root
        for ch in key:
            nxt = self.arcs[state].get(ch)
            if nxt is None:
                return None
            state = nxt
        return self.outputs[state]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None

    def items(self) -> Iterator[tuple[str, bytes]]:
        """All ``(key, output)`` pairs in key order."""
        stack: list[tuple[int, str]] = [(self.root, "")]
        while stack:
            state, prefix = stack.pop()
            output = self.outputs[state]
            if output is not None:
                yield prefix, output
            for label in sorted(self.arcs[state], reverse=True):
                stack.append((self.arcs[state][label], prefix + label))

    # ------------------------------------------------------------------
    # Byte form
    # ------------------------------------------------------------------

    def to_bytes(self) -> bytes:
        out = bytearray()
        write_vint(len(self.arcs), out)
        write_vint(self.root, out)
        write_vint(self.key_count, out)
        for arcs, output in zip(self.arcs, self.outputs):
            if output is None:
                out.append(0)
            else:
                out.append(_FINAL)
                write_vint(len(output), out)
                out += output
            write_vint(len(arcs), out)
            for label in sorted(arcs):
                write_vint(ord(label), out)
                write_vint(arcs[label], out)
        return bytes(out)

    @classmethod
    def from_bytes(cls, data: bytes) -> Transducer:
        try:
            num_states, pos = read_vint(data)
            root, pos = read_vint(data, pos)
            key_count, pos = read_vint(data, pos)
            arcs: list[dict[str, int]] = []
            outputs: list[bytes | None] = []
            for _ in range(num_states):
                flags = data[pos]
                pos += 1
                output = None
                if flags & _FINAL:
                    size, pos = read_vint(data, pos)
                    if pos + size > len(data):
                        raise ValueError("truncated output")
                    output = bytes(data[pos:pos + size])
                    pos += size
                n_arcs, pos = read_vint(data, pos)
                state_arcs = {}
                for _ in range(n_arcs):
                    label, pos = read_vint(data, pos)
                    target, pos = read_vint(data, pos)
                    if target >= num_states:
                        raise ValueError(f"arc target {target} out of range")
                    state_arcs[chr(label)] = target
                arcs.append(state_arcs)
                outputs.append(output)
        except (ValueError, IndexError) as e:
            raise DictionaryLoadError(f"Corrupt transducer data: {e}") from e
        if pos != len(data) or root >= num_states:
            raise DictionaryLoadError("Corrupt transducer data: bad layout")
        return cls(arcs, outputs, root, key_count)
