"""
Front-end registry for language-specific parsers.

Provides a plugin-based architecture where language front-ends
can be registered and retrieved dynamically.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Type

from protein_hash.analysis.syntax import SyntaxNode

logger = logging.getLogger(__name__)


class BaseLanguageFrontend:
    """
    Abstract base class for language front-ends.

    Each language plugin turns source text into a SyntaxNode tree
    that the graph builder can walk.
    """

    LANGUAGE: str = "unknown"
    SUPPORTED_EXTENSIONS: List[str] = []

    def parse(self, source: str) -> SyntaxNode:
        """
        Parse source text.

        Args:
            source: Source code content.

        Returns:
            Root SyntaxNode of the parse tree.

        Raises:
            InvalidInputError: If the source does not parse cleanly.
        """
        raise NotImplementedError("Subclasses must implement parse")


class FrontendRegistry:
    """
    Central registry for language front-ends.

    Manages the registration and retrieval of language-specific
    parser plugins.
    """

    _frontends: Dict[str, Type[BaseLanguageFrontend]] = {}
    _instances: Dict[str, BaseLanguageFrontend] = {}

    @classmethod
    def register(cls, frontend_class: Type[BaseLanguageFrontend]) -> Type[BaseLanguageFrontend]:
        """
        Register a language front-end.

        Can be used as a decorator:
            @FrontendRegistry.register
            class PythonFrontend(BaseLanguageFrontend):
                ...

        Args:
            frontend_class: The front-end class to register.

        Returns:
            The registered class (for decorator usage).
        """
        language = frontend_class.LANGUAGE
        if language in cls._frontends:
            logger.warning(
                f"Overwriting existing front-end for {language}: "
                f"{cls._frontends[language].__name__} -> {frontend_class.__name__}"
            )

        cls._frontends[language] = frontend_class
        cls._instances.pop(language, None)
        logger.debug(f"Registered front-end for {language}: {frontend_class.__name__}")
        return frontend_class

    @classmethod
    def get_frontend(cls, language: str) -> Optional[BaseLanguageFrontend]:
        """
        Get a front-end instance for a language.

        Lazily instantiates front-ends on first request.

        Args:
            language: Language identifier.

        Returns:
            Front-end instance or None if not available.
        """
        if language not in cls._frontends:
            return None

        if language not in cls._instances:
            cls._instances[language] = cls._frontends[language]()

        return cls._instances[language]

    @classmethod
    def has_frontend(cls, language: str) -> bool:
        """Check if a front-end exists for a language."""
        return language in cls._frontends

    @classmethod
    def list_languages(cls) -> List[str]:
        """List all languages with registered front-ends."""
        return list(cls._frontends.keys())

    @classmethod
    def language_for_path(cls, path: str) -> Optional[str]:
        """Map a file path to a registered language by its extension."""
        suffix = Path(path).suffix.lower()
        for language, frontend_class in cls._frontends.items():
            if suffix in frontend_class.SUPPORTED_EXTENSIONS:
                return language
        return None

    @classmethod
    def extensions_for_language(cls, language: str) -> List[str]:
        """List the file extensions a language front-end accepts."""
        frontend_class = cls._frontends.get(language)
        return list(frontend_class.SUPPORTED_EXTENSIONS) if frontend_class else []

    @classmethod
    def clear(cls) -> None:
        """Clear all registered front-ends (mainly for testing)."""
        cls._frontends.clear()
        cls._instances.clear()
