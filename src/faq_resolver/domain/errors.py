"""Error taxonomy for FAQ resolution and storage.

``NotFound`` is deliberately absent: it is a normal resolution outcome, not an
exception (see ``faq_resolver.domain.model.NotFound``).
"""


class FaqError(Exception):
    """Base error for the FAQ resolution engine."""


class StoreError(FaqError):
    """Underlying persistence failure (I/O, corrupt database, constraint)."""


class CacheUnavailableError(FaqError):
    """The title index cache guard could not be acquired or the cache is closed.

    Surfaced instead of treating the cache as empty, which would silently
    disable fuzzy matching.
    """


class BrokenAliasError(FaqError):
    """An alias points at a title that does not exist in the store."""

    def __init__(self, tenant_id: int, title: str, alias_target: str) -> None:
        super().__init__(f"FAQ alias {title!r} in tenant {tenant_id} points at missing entry {alias_target!r}")
        self.tenant_id = tenant_id
        self.title = title
        self.alias_target = alias_target


class DuplicateTitleError(FaqError):
    """An entry with the requested title already exists for the tenant."""

    def __init__(self, tenant_id: int, title: str) -> None:
        super().__init__(f"An FAQ entry with title {title!r} already exists in tenant {tenant_id}")
        self.tenant_id = tenant_id
        self.title = title


class LinkTargetNotFoundError(FaqError):
    """The entry an alias should point at does not exist."""

    def __init__(self, tenant_id: int, title: str) -> None:
        super().__init__(f"Could not find FAQ entry {title!r} in tenant {tenant_id} to link to")
        self.tenant_id = tenant_id
        self.title = title
