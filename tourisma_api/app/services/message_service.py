"""
Message templates for automatic messages.

Templates are stored in ``DataStore.templates`` keyed by name.  When a
template has never been customised the built-in default is used, so an
empty store still produces welcome messages.  Templates use
``str.format`` placeholders; each key only accepts the placeholders its
caller fills in.
"""

import logging
import string
from typing import Dict, FrozenSet, List

from ..core.exceptions import NotFoundError, ValidationFailedError
from ..core.store import DataStore
from ..schemas.message import MessageTemplate

logger = logging.getLogger(__name__)

EXPERIENCE_WELCOME = "experience_welcome"
SUPPORT_WELCOME_PARTNER = "support_welcome_partner"
SUPPORT_WELCOME_CLIENT = "support_welcome_client"

DEFAULT_TEMPLATES: Dict[str, str] = {
    EXPERIENCE_WELCOME: (
        "Bonjour, merci pour votre intérêt concernant l'expérience \"{experience_title}\". "
        "Je suis à votre disposition si vous avez des questions !"
    ),
    SUPPORT_WELCOME_PARTNER: (
        "Bonjour {name}, bienvenue sur votre espace partenaire ! "
        "Comment pouvons-nous vous aider à gérer vos expériences aujourd'hui ?"
    ),
    SUPPORT_WELCOME_CLIENT: (
        "Bonjour {name}, bienvenue sur Tourisma ! "
        "Une question sur une réservation ou une expérience ? Notre équipe est là pour vous."
    ),
}

# Placeholders each template may use / must use.
ALLOWED_FIELDS: Dict[str, FrozenSet[str]] = {
    EXPERIENCE_WELCOME: frozenset({"experience_title"}),
    SUPPORT_WELCOME_PARTNER: frozenset({"name"}),
    SUPPORT_WELCOME_CLIENT: frozenset({"name"}),
}
REQUIRED_FIELDS: Dict[str, FrozenSet[str]] = {
    EXPERIENCE_WELCOME: frozenset({"experience_title"}),
}


def _placeholders(content: str) -> FrozenSet[str]:
    try:
        return frozenset(name for _, name, _, _ in string.Formatter().parse(content) if name is not None)
    except ValueError as e:
        raise ValidationFailedError(f"Malformed template: {e}") from e


class TemplateService:
    """Service for listing, editing and rendering message templates."""

    def __init__(self, store: DataStore) -> None:
        self.store = store

    def _check_key(self, key: str) -> None:
        if key not in DEFAULT_TEMPLATES:
            raise NotFoundError(f"Template {key} not found")

    def get_template(self, key: str) -> MessageTemplate:
        self._check_key(key)
        return MessageTemplate(key=key, content=self.store.templates.get(key, DEFAULT_TEMPLATES[key]))

    def list_templates(self) -> List[MessageTemplate]:
        return [self.get_template(key) for key in DEFAULT_TEMPLATES]

    def upsert_template(self, key: str, content: str) -> MessageTemplate:
        """Replace the content of a template.

        Raises ``ValidationFailedError`` if the content uses a
        placeholder the template's caller cannot fill, or omits one the
        template needs.
        """
        self._check_key(key)
        content = content.strip()
        if not content:
            raise ValidationFailedError("Template content cannot be empty")
        fields = _placeholders(content)
        unknown = fields - ALLOWED_FIELDS[key]
        if unknown:
            raise ValidationFailedError(f"Unknown placeholders for {key}: {', '.join(sorted(unknown))}")
        missing = REQUIRED_FIELDS.get(key, frozenset()) - fields
        if missing:
            raise ValidationFailedError(f"Template {key} must contain {', '.join(sorted(missing))}")
        self.store.templates[key] = content
        logger.info("Template %s updated", key)
        return MessageTemplate(key=key, content=content)

    def reset_template(self, key: str) -> MessageTemplate:
        """Drop the customised content so the default applies again."""
        self._check_key(key)
        self.store.templates.pop(key, None)
        logger.info("Template %s reset to default", key)
        return self.get_template(key)

    def render(self, key: str, **values: str) -> str:
        return self.get_template(key).content.format(**values)
