"""Models for the rendered Jasmine results read from the page."""

from collections.abc import Sequence

from pydantic import Field

from jasmine_teamcity.models.base import Model


class ElementSnapshot(Model):
    """A DOM element below the results summary container."""

    class_name: str = Field(
        default="", alias="className", description="Raw class attribute"
    )
    text: str = Field(default="", description="Rendered inner text")
    href: str | None = Field(default=None, description="href attribute, if any")
    children: Sequence["ElementSnapshot"] = Field(
        default_factory=tuple, description="Element children in document order"
    )

    @property
    def classes(self) -> frozenset[str]:
        """Class tokens of the element."""
        return frozenset(self.class_name.split())

    def has_class(self, name: str) -> bool:
        """Check whether the element carries the given class token."""
        return name in self.classes

    @property
    def anchor_href(self) -> str | None:
        """href of the element's first child (the spec or description link)."""
        if not self.children:
            return None
        return self.children[0].href


class FailureSnapshot(Model):
    """A failed spec detail node from the failures list."""

    href: str | None = Field(default=None, description="Description anchor href")
    title: str | None = Field(default=None, description="Description anchor title")
    message: str = Field(default="", description="Rendered failure message")


class ResultsSnapshot(Model):
    """Everything the translator needs from one read of the page."""

    failures: Sequence[FailureSnapshot] = Field(default_factory=tuple)
    suites: Sequence[ElementSnapshot] = Field(
        default_factory=tuple,
        description="Direct children of the results summary container",
    )
