"""License assembly: from a specification to deduplicated per-language content.

Stages:
    1. Resolve every entry's languages and index entries by language.
       The first entry declaring a language wins it; later claims are
       reported together as one collision per entry kind.
    2. Start every load at once: one body task per winning body entry
       (encoded for all of that entry's languages), one read task per used
       label entry, and one label task per language with a body. Nothing is
       cancelled when a sibling fails.
    3. Once all tasks have finished, pair each language's body with its
       labels, merge byte-identical results, and choose the default language.
    4. Surface every collected error at once, or return the result.

Slot order follows first assignment in declaration order, never task
completion order.

Python 3.13+.
"""

from __future__ import annotations

import asyncio
import logging
import zlib
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from dmglicense.bodies import PreparedBody, prepare_body
from dmglicense.catalog.language import Language, LanguageSpecifier
from dmglicense.context import AssemblyContext, AssemblyOptions
from dmglicense.diagnostics import (
    DefaultLanguageError,
    DMGLicenseError,
    EmptyLanguageListError,
    ErrorBuffer,
    ErrorCode,
    LanguageCollisionError,
    NoLicenseContentError,
    NoSuchLanguageError,
)
from dmglicense.diagnostics.errors import describe_languages
from dmglicense.enums import BodyType
from dmglicense.labels.loading import LabelSource, pack_label_source, read_label_source
from dmglicense.specification import BodyEntry, LabelEntry, LicenseSpecification

__all__ = [
    "AssembledLicense",
    "AssembledLicenseSet",
    "assemble",
    "assemble_licenses",
    "choose_default_language_id",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AssembledLicense:
    """Body and labels shared by one or more languages.

    Attributes:
        body_type: Resource type of the body
        body: Encoded body bytes
        labels: Packed STR# label resource
        language_ids: Languages using this content, in assignment order
    """

    body_type: BodyType
    body: bytes
    labels: bytes
    language_ids: tuple[int, ...]

    def same_content(self, other: AssembledLicense) -> bool:
        """Byte-for-byte equality of body type, body and labels."""
        return (
            self.body_type == other.body_type
            and self.body == other.body
            and self.labels == other.labels
        )


@dataclass(frozen=True, slots=True)
class AssembledLicenseSet:
    """Result of an assembly.

    Attributes:
        in_order: Distinct licenses in slot order
        by_language_id: Each language's license, in first-assignment order
        default_language_id: Language the installer shows first
    """

    in_order: tuple[AssembledLicense, ...]
    by_language_id: Mapping[int, AssembledLicense]
    default_language_id: int


@dataclass(slots=True)
class _Merged:
    body_type: BodyType
    body: bytes
    labels: bytes
    language_ids: list[int] = field(default_factory=list)

    def content_hash(self) -> int:
        crc = zlib.crc32(self.body_type.encode("ascii"))
        crc = zlib.crc32(self.body, crc)
        return zlib.crc32(self.labels, crc)

    def same_content(self, other: _Merged) -> bool:
        return (
            self.body_type == other.body_type
            and self.body == other.body
            and self.labels == other.labels
        )

    def freeze(self) -> AssembledLicense:
        return AssembledLicense(self.body_type, self.body, self.labels, tuple(self.language_ids))


E = TypeVar("E")
T = TypeVar("T")
EntryT = TypeVar("EntryT", bound="BodyEntry | LabelEntry")


@dataclass(frozen=True, slots=True)
class _Resolved(Generic[E]):
    entry: E
    languages: list[Language]


def _resolve_entries(
    entries: Sequence[EntryT], kind: str, context: AssemblyContext, errors: ErrorBuffer
) -> list[_Resolved[EntryT]]:
    resolved: list[_Resolved[EntryT]] = []
    warned_empty = False
    for entry in entries:
        if not entry.languages:
            if not warned_empty:
                context.warning(EmptyLanguageListError(kind), errors)
                warned_empty = True
            continue
        try:
            languages = context.resolve_languages(entry.languages, errors)
        except NoSuchLanguageError as e:
            errors.add(e)
            continue
        resolved.append(_Resolved(entry, languages))
    return resolved


def _index_by_language(
    resolved: Sequence[_Resolved[E]], kind: str, context: AssemblyContext, errors: ErrorBuffer
) -> dict[int, int]:
    """Map language ID -> index into ``resolved``; first declaration wins."""
    winners: dict[int, int] = {}
    collided: list[Language] = []
    for index, item in enumerate(resolved):
        for language in item.languages:
            if language.id not in winners:
                winners[language.id] = index
            elif winners[language.id] != index and language not in collided:
                collided.append(language)
    if collided:
        context.non_fatal_error(LanguageCollisionError(kind, collided), errors)
    return winners


def _outcome(task: asyncio.Task[T]) -> T | BaseException:
    error = task.exception()
    return error if error is not None else task.result()


def _deduplicate(candidates: Sequence[_Merged]) -> list[_Merged]:
    buckets: dict[int, list[_Merged]] = {}
    distinct: list[_Merged] = []
    for candidate in candidates:
        bucket = buckets.setdefault(candidate.content_hash(), [])
        for other in bucket:
            if other.same_content(candidate):
                other.language_ids.extend(candidate.language_ids)
                logger.debug(
                    "Merged languages %s into license for %s",
                    candidate.language_ids,
                    other.language_ids[0],
                )
                break
        else:
            bucket.append(candidate)
            distinct.append(candidate)
    return distinct


def choose_default_language_id(
    default_language: LanguageSpecifier | None,
    bodies: Sequence[tuple[BodyEntry, Sequence[Language]]],
    assigned: Mapping[int, object],
    context: AssemblyContext,
    errors: ErrorBuffer | None = None,
) -> int:
    """Pick the default language among the keys of ``assigned``.

    Priority:
        1. ``default_language``, if it resolves and has content
        2. The first language of body entries flagged ``default``
           (a warning names every candidate if they disagree)
        3. The first assigned language of the first body entry
        4. The first key of ``assigned``

    Raises:
        ValueError: If ``assigned`` is empty
    """
    if not assigned:
        msg = "Cannot choose a default language without any assigned language"
        raise ValueError(msg)

    if default_language is not None:
        try:
            language = context.catalog.resolve(default_language)[0]
        except NoSuchLanguageError as e:
            context.non_fatal_error(e, errors)
        else:
            if language.id in assigned:
                return language.id
            msg = (
                f"The default language {language} has no license body, "
                "so another default language has been chosen."
            )
            context.non_fatal_error(
                DefaultLanguageError(msg, candidates=[language.id]), errors
            )

    flagged: list[int] = []
    for entry, languages in bodies:
        if not entry.default:
            continue
        first = next((lang.id for lang in languages if lang.id in assigned), None)
        if first is not None and first not in flagged:
            flagged.append(first)
    if flagged:
        if len(flagged) > 1:
            msg = (
                "More than one license body is marked as the default, for languages "
                f"{', '.join(str(i) for i in flagged)}. The first one has been used."
            )
            context.warning(
                DefaultLanguageError(
                    msg, candidates=flagged, code=ErrorCode.DEFAULT_LANGUAGE_CONFLICT
                ),
                errors,
            )
        return flagged[0]

    for _, languages in bodies:
        for language in languages:
            if language.id in assigned:
                return language.id

    return next(iter(assigned))


async def assemble_licenses(
    spec: LicenseSpecification,
    options: AssemblyOptions | AssemblyContext | None = None,
) -> AssembledLicenseSet:
    """Load, encode and deduplicate every license in ``spec``.

    Args:
        spec: License specification
        options: Options, or an existing context to share caches with

    Returns:
        Deduplicated licenses, the language mapping, and the default language

    Raises:
        NoLicenseContentError: If no body entry resolves to any language
        DMGLicenseError: The single collected error, if exactly one
        MultiError: Every collected error, if more than one
    """
    context = AssemblyContext.from_options(options)
    errors = ErrorBuffer()

    bodies = _resolve_entries(spec.bodies, "body", context, errors)
    label_entries = _resolve_entries(spec.labels, "label", context, errors)
    body_for = _index_by_language(bodies, "license body", context, errors)
    labels_for = _index_by_language(label_entries, "label set", context, errors)

    if not body_for:
        errors.raise_with(NoLicenseContentError("No license bodies were provided."))

    languages_by_id = {
        language.id: language for item in bodies for language in item.languages
    }

    body_tasks: dict[int, asyncio.Task[PreparedBody]] = {}
    source_tasks: dict[int, asyncio.Task[LabelSource]] = {}
    for index in dict.fromkeys(body_for.values()):
        item = bodies[index]
        # Encode only for the languages this entry won.
        won = [language for language in item.languages if body_for[language.id] == index]
        body_tasks[index] = asyncio.create_task(prepare_body(item.entry, won, context))
    for language_id in body_for:
        index = labels_for.get(language_id)
        if index is not None and index not in source_tasks:
            source_tasks[index] = asyncio.create_task(
                read_label_source(label_entries[index].entry, context)
            )

    async def labels_of(language: Language) -> bytes:
        index = labels_for.get(language.id)
        if index is None:
            return context.default_labels_of(language)
        return pack_label_source(await source_tasks[index], language, context)

    label_tasks = {
        language_id: asyncio.create_task(labels_of(languages_by_id[language_id]))
        for language_id in body_for
    }

    await asyncio.gather(
        *body_tasks.values(), *source_tasks.values(), *label_tasks.values(),
        return_exceptions=True,
    )

    candidates: list[_Merged] = []
    for language_id, index in body_for.items():
        body = _outcome(body_tasks[index])
        labels = _outcome(label_tasks[language_id])
        if isinstance(body, BaseException) or isinstance(labels, BaseException):
            errors.add(*(o for o in (body, labels) if isinstance(o, BaseException)))
            continue
        candidates.append(_Merged(body.type, body.data, labels, [language_id]))

    unused = [
        languages_by_id.get(language_id) or context.catalog.by_id(language_id)
        for language_id in labels_for
        if language_id not in body_for
    ]
    if unused:
        logger.debug(
            "Ignoring label sets for languages without a license body: %s",
            describe_languages(lang for lang in unused if lang is not None),
        )

    distinct = _deduplicate(candidates)
    if not distinct:
        errors.raise_with(NoLicenseContentError("No license could be assembled for any language."))

    frozen = [merged.freeze() for merged in distinct]
    by_language_id: dict[int, AssembledLicense] = {}
    for language_id in body_for:
        for license_ in frozen:
            if language_id in license_.language_ids:
                by_language_id[language_id] = license_
                break

    default_language_id = choose_default_language_id(
        spec.default_language,
        [(item.entry, item.languages) for item in bodies],
        by_language_id,
        context,
        errors,
    )

    errors.check()

    logger.info(
        "Assembled %d license(s) for %d language(s); default language %d",
        len(frozen),
        len(by_language_id),
        default_language_id,
    )
    return AssembledLicenseSet(tuple(frozen), by_language_id, default_language_id)


def assemble(
    spec: LicenseSpecification,
    options: AssemblyOptions | AssemblyContext | None = None,
) -> AssembledLicenseSet:
    """Synchronous wrapper around assemble_licenses() for callers without an event loop."""
    return asyncio.run(assemble_licenses(spec, options))
