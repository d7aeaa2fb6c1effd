"""Rule declaration and execution engine for the LaTeX renderer.

Rules are plain functions decorated with ``@renders``. The decorator only
records a :class:`RuleDefinition` on the function; nothing is registered
globally. A :class:`RuleSet` collects definitions into concrete
:class:`RenderRule` objects grouped by phase and tag, and a
:class:`RenderEngine` walks a BeautifulSoup tree applying one rule set.

Because the rule set is an ordinary value handed to each render call, two
renderers built from different rule sets never interfere with each other.

Each rule replaces the node it handles with a LaTeX fragment (a
``NavigableString``). Rules flagged ``after_children`` run once the subtree
below them has been rendered, which is how inline markup and nested blocks
receive already-rendered content.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from enum import Enum, auto
from types import ModuleType
from typing import TYPE_CHECKING, Any, cast


if TYPE_CHECKING:  # pragma: no cover - typing only
    from bs4.element import Tag

    from .context import RenderContext


class RenderPhase(Enum):
    """Ordered passes executed over the parsed tree.

    ``PRE``
    : escape leaf text and freeze verbatim payloads (code, math) before any
      markup is produced.

    ``BLOCK``
    : standalone blocks that do not depend on their children.

    ``INLINE``
    : inline formatting (emphasis, links, images).

    ``POST``
    : structural blocks that wrap rendered children (headings, paragraphs,
      lists, tables, quotations).
    """

    PRE = auto()
    BLOCK = auto()
    INLINE = auto()
    POST = auto()


RuleCallable = Callable[[Any, "RenderContext"], None]

DOCUMENT_NODE = "__document__"


@dataclass
class RenderRule:
    """Concrete rendering rule bound to a handler."""

    priority: int
    phase: RenderPhase
    tags: tuple[str, ...]
    name: str
    handler: RuleCallable
    auto_mark: bool = True
    nestable: bool = True
    after_children: bool = False

    def applies_to_document(self) -> bool:
        """Return True when the rule targets the synthetic document node."""
        return self.tags == (DOCUMENT_NODE,)


@dataclass(frozen=True)
class RuleDefinition:
    """Descriptor installed on handler callables by the decorator."""

    phase: RenderPhase
    tags: tuple[str, ...]
    priority: int = 0
    name: str | None = None
    auto_mark: bool = True
    nestable: bool = True
    after_children: bool = False

    def bind(self, handler: RuleCallable) -> RenderRule:
        """Create a concrete rule instance bound to the callable."""
        name = self.name or getattr(handler, "__name__", handler.__class__.__name__)
        return RenderRule(
            phase=self.phase,
            tags=self.tags,
            priority=self.priority,
            name=name,
            handler=handler,
            auto_mark=self.auto_mark,
            nestable=self.nestable,
            after_children=self.after_children,
        )


def renders(
    *tags: str,
    phase: RenderPhase = RenderPhase.BLOCK,
    priority: int = 0,
    name: str | None = None,
    auto_mark: bool = True,
    nestable: bool = True,
    after_children: bool = False,
) -> Callable[[RuleCallable], RuleCallable]:
    """Decorator declaring which tags a handler renders and when."""
    definition = RuleDefinition(
        phase=phase,
        tags=tuple(tags or (DOCUMENT_NODE,)),
        priority=priority,
        name=name,
        auto_mark=auto_mark,
        nestable=nestable,
        after_children=after_children,
    )

    def decorator(handler: RuleCallable) -> RuleCallable:
        cast(Any, handler).__render_rule__ = definition
        return handler

    return decorator


class RuleSet:
    """Collection of render rules, grouped by phase then tag."""

    def __init__(self, rules: Iterable[RenderRule] = ()) -> None:
        self._rules: dict[RenderPhase, dict[str, list[RenderRule]]] = {}
        for rule in rules:
            self.add(rule)

    @classmethod
    def from_modules(cls, *owners: ModuleType | object) -> RuleSet:
        """Build a rule set from every decorated callable found on ``owners``."""
        rule_set = cls()
        for owner in owners:
            rule_set.collect_from(owner)
        return rule_set

    def add(self, rule: RenderRule) -> None:
        """Insert a bound rule, keeping each bucket sorted by priority then name."""
        phase_bucket = self._rules.setdefault(rule.phase, {})
        for tag in rule.tags:
            bucket = phase_bucket.setdefault(tag, [])
            bucket.append(rule)
            bucket.sort(key=lambda item: (item.priority, item.name))

    def register(self, handler: RuleCallable) -> None:
        """Register a standalone callable decorated with ``@renders``."""
        definition = getattr(handler, "__render_rule__", None)
        if not isinstance(definition, RuleDefinition):
            msg = "Handler must be decorated with @renders"
            raise TypeError(msg)
        self.add(definition.bind(handler))

    def collect_from(self, owner: ModuleType | object) -> None:
        """Collect decorated callables from a module, class, or instance."""
        for attribute in dir(owner):
            handler = getattr(owner, attribute)
            definition = getattr(handler, "__render_rule__", None)
            if isinstance(definition, RuleDefinition):
                self.add(definition.bind(handler))

    def without(self, *names: str) -> RuleSet:
        """Return a copy of the rule set lacking the named rules."""
        excluded = set(names)
        return RuleSet(rule for rule in self if rule.name not in excluded)

    def rules_for_phase(self, phase: RenderPhase) -> dict[str, tuple[RenderRule, ...]]:
        """Return the tag to rules mapping for the requested phase."""
        return {tag: tuple(rules) for tag, rules in self._rules.get(phase, {}).items()}

    def names(self) -> list[str]:
        """Return the unique rule names in execution order."""
        return list(dict.fromkeys(rule.name for rule in self))

    def describe(self) -> list[dict[str, object]]:
        """Return a serialisable snapshot of the registered rules."""
        entries: list[dict[str, object]] = []
        for phase in RenderPhase:
            for tag, rules in sorted(self.rules_for_phase(phase).items()):
                for order, rule in enumerate(rules):
                    entries.append(
                        {
                            "phase": phase.name,
                            "tag": tag,
                            "name": rule.name,
                            "priority": rule.priority,
                            "order": order,
                        }
                    )
        return entries

    def __iter__(self) -> Iterator[RenderRule]:
        seen: set[int] = set()
        for phase in RenderPhase:
            for rules in self._rules.get(phase, {}).values():
                for rule in rules:
                    if id(rule) in seen:
                        continue
                    seen.add(id(rule))
                    yield rule

    def __len__(self) -> int:
        return sum(1 for _ in self)


class RenderEngine:
    """Apply one rule set to a parsed tree, phase by phase."""

    def __init__(self, rules: RuleSet) -> None:
        self.rules = rules

    def run(self, root: Tag, context: RenderContext) -> None:
        """Execute every rule of the set against ``root``."""
        for phase in RenderPhase:
            context.enter_phase(phase)
            phase_rules = self.rules.rules_for_phase(phase)

            for rule in phase_rules.get(DOCUMENT_NODE, ()):
                self._execute_rule(rule, root, context)

            _DOMVisitor(phase, phase_rules, context).walk(root)

    def _execute_rule(self, rule: RenderRule, node: Any, context: RenderContext) -> None:
        if rule.auto_mark and context.is_processed(node):
            return
        rule.handler(node, context)
        if rule.auto_mark:
            context.mark_processed(node)
        if not rule.nestable:
            context.suppress_children(node)


class _DOMVisitor:
    """Depth-first visitor applying rules by tag while traversing the tree."""

    def __init__(
        self,
        phase: RenderPhase,
        rules_by_tag: dict[str, tuple[RenderRule, ...]],
        context: RenderContext,
    ) -> None:
        self.phase = phase
        self.rules_by_tag = rules_by_tag
        self.context = context

    def walk(self, node: Tag) -> None:
        """Traverse descendants depth-first and apply matching rules."""
        self._dispatch(node, after_children=False)
        if node.parent is None and node.name != "[document]":
            return
        if self.context.should_skip_children(node, phase=self.phase):
            return

        # Rules replace nodes while we iterate.
        for child in list(getattr(node, "children", ())):
            if getattr(child, "name", None):
                self.walk(child)

        self._dispatch(node, after_children=True)

    def _dispatch(self, node: Tag, *, after_children: bool) -> None:
        tag_name = getattr(node, "name", None)
        if not tag_name:
            return

        for rule in self.rules_by_tag.get(tag_name, ()):
            if rule.after_children != after_children:
                continue
            if node.parent is None and tag_name != "[document]":
                # Replaced by an earlier rule of this dispatch.
                return
            if rule.auto_mark and self.context.is_processed(node):
                continue
            rule.handler(node, self.context)
            if rule.auto_mark:
                self.context.mark_processed(node)
            if not rule.nestable:
                self.context.suppress_children(node)


__all__ = [
    "DOCUMENT_NODE",
    "RenderEngine",
    "RenderPhase",
    "RenderRule",
    "RuleDefinition",
    "RuleSet",
    "renders",
]
