"""Assembly options and the shared context."""

from pathlib import Path

import pytest

from dmglicense import AssemblyContext, AssemblyOptions
from dmglicense.catalog import LanguageCatalog, load_default_catalog
from dmglicense.diagnostics import (
    DMGLicenseError,
    ErrorBuffer,
    LanguageCollisionError,
    NoDefaultLabelsError,
    NoSuchLanguageError,
)
from dmglicense.labels import pack_labels
from tests.helpers.catalog import ENGLISH, ENGLISH_LABELS, GERMAN


def _collision() -> LanguageCollisionError:
    return LanguageCollisionError("license body", [ENGLISH])


class TestAssemblyOptions:
    def test_defaults(self) -> None:
        options = AssemblyOptions()
        assert options.on_non_fatal_error is None
        assert options.catalog is None

    def test_cache_size_validated(self) -> None:
        with pytest.raises(ValueError, match="codec_cache_size must be positive"):
            AssemblyOptions(codec_cache_size=0)

    def test_bundled_catalog_by_default(self) -> None:
        assert AssemblyContext().catalog is load_default_catalog()


class TestPaths:
    def test_relative_to_base_dir(self, tmp_path: Path) -> None:
        context = AssemblyContext(AssemblyOptions(base_dir=tmp_path))
        assert context.resolve_path("a/b.txt") == tmp_path / "a" / "b.txt"

    def test_custom_resolver_wins(self, tmp_path: Path) -> None:
        context = AssemblyContext(
            AssemblyOptions(base_dir="/ignored", resolve_path=lambda p: tmp_path / p.upper())
        )
        assert context.resolve_path("x") == tmp_path / "X"

    def test_unchanged_without_options(self) -> None:
        assert AssemblyContext().resolve_path("x.txt") == Path("x.txt")


class TestFromOptions:
    def test_context_is_reused(self, context: AssemblyContext) -> None:
        assert AssemblyContext.from_options(context) is context

    def test_options_make_new_context(self, catalog: LanguageCatalog) -> None:
        context = AssemblyContext.from_options(AssemblyOptions(catalog=catalog))
        assert context.catalog is catalog


class TestNonFatalChannel:
    def test_warning_dropped_without_sink(self, context: AssemblyContext) -> None:
        errors = ErrorBuffer()
        context.warning(_collision(), errors)
        assert not errors
        assert not context.can_warn

    def test_non_fatal_error_raises_without_sink(self, context: AssemblyContext) -> None:
        with pytest.raises(LanguageCollisionError):
            context.non_fatal_error(_collision())

    def test_non_fatal_error_collected_without_sink(self, context: AssemblyContext) -> None:
        errors = ErrorBuffer()
        error = _collision()
        context.non_fatal_error(error, errors)
        assert errors.errors == (error,)

    def test_sink_receives_both(self, catalog: LanguageCatalog) -> None:
        received: list[DMGLicenseError] = []
        context = AssemblyContext(
            AssemblyOptions(catalog=catalog, on_non_fatal_error=received.append)
        )
        first, second = _collision(), _collision()
        context.warning(first)
        context.non_fatal_error(second)
        assert received == [first, second]

    def test_failing_sink_is_collected(self, catalog: LanguageCatalog) -> None:
        def sink(error: DMGLicenseError) -> None:
            raise RuntimeError("sink broke")

        context = AssemblyContext(AssemblyOptions(catalog=catalog, on_non_fatal_error=sink))
        errors = ErrorBuffer()
        context.warning(_collision(), errors)
        assert len(errors) == 1
        assert isinstance(errors.errors[0], RuntimeError)


class TestResolveLanguages:
    def test_without_sink(self, context: AssemblyContext) -> None:
        with pytest.raises(NoSuchLanguageError):
            context.resolve_languages(["en", "zz"])

    def test_with_sink(self, catalog: LanguageCatalog) -> None:
        received: list[DMGLicenseError] = []
        context = AssemblyContext(
            AssemblyOptions(catalog=catalog, on_non_fatal_error=received.append)
        )
        assert context.resolve_languages(["en", "zz"]) == [ENGLISH]
        assert len(received) == 1
        assert isinstance(received[0], NoSuchLanguageError)


class TestDefaultLabels:
    def test_packed_once(self, context: AssemblyContext) -> None:
        first = context.default_labels_of(ENGLISH)
        assert first == pack_labels(ENGLISH_LABELS, ENGLISH, context.codecs)
        assert context.default_labels_of(ENGLISH) is first

    def test_missing(self, context: AssemblyContext) -> None:
        with pytest.raises(NoDefaultLabelsError):
            context.default_labels_of(GERMAN)
