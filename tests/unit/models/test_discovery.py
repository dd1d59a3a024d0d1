"""Tests for discovery models."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from cljr_test_adapter.models.discovery import DiscoveredTest
from cljr_test_adapter.testing.factories import DiscoveredTestFactory


def test_rejects_unknown_fields() -> None:
    """Unknown fields are a validation error, not silently dropped."""
    with pytest.raises(ValidationError):
        DiscoveredTest(
            namespace="math-test",
            name="adds",
            source_file=Path("/project/test/math_test.cljr"),
            source=Path("/project/app.dll"),
            namespce="typo",  # type: ignore[call-arg]
        )


def test_is_immutable() -> None:
    """Assigning to a field raises."""
    test = DiscoveredTestFactory.build()

    with pytest.raises(ValidationError):
        test.name = "other"  # type: ignore[misc]


def test_declarations_differ_by_line_number() -> None:
    """Same fully-qualified name on different lines are distinct identities."""
    first = DiscoveredTestFactory.build(namespace="ns", name="same", line_number=1)
    second = first.model_copy(update={"line_number": 5})

    assert first.fully_qualified_name == second.fully_qualified_name
    assert first != second
    assert len({first, second}) == 2


def test_display_name_prefers_label() -> None:
    """Uses the label when set, otherwise the local name."""
    plain = DiscoveredTestFactory.build(name="adds", label=None)
    labelled = DiscoveredTestFactory.build(name="adds", label="Adds numbers")

    assert plain.display_name == "adds"
    assert labelled.display_name == "Adds numbers"
