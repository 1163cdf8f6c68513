"""Registre des cibles d'import (collections connues et leurs champs)."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

from rapidfuzz import fuzz, process

from smartimport.config import UnknownTargetError
from smartimport.normalize import norm_field_name


class FieldKind(Enum):
    """Nature d'un champ cible, qui détermine sa coercition."""

    TEXT = "text"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    LIST = "list"
    DATE = "date"


@dataclass(frozen=True)
class FieldSpec:
    """Définition d'un champ d'une cible."""

    name: str
    kind: FieldKind = FieldKind.TEXT
    required: bool = False
    aliases: tuple[str, ...] = ()
    default: Any = None  # None = valeur vide du type (DATE: date du jour)
    mappable: bool = True  # False = champ de sortie, jamais lu dans la source


@dataclass(frozen=True)
class TargetSchema:
    """Cible d'import : champs requis, optionnels, alias et forme de sortie."""

    id: str
    label: str
    emoji: str
    fields: tuple[FieldSpec, ...]
    _by_name: Mapping[str, FieldSpec] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        names = [f.name for f in self.fields]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Cible {self.id!r}: champs en double {duplicates}")
        if not any(f.required for f in self.fields):
            raise ValueError(f"Cible {self.id!r}: au moins un champ requis attendu")
        for f in self.fields:
            if f.required and not f.mappable:
                raise ValueError(f"Cible {self.id!r}: le champ requis {f.name!r} doit être mappable")
        object.__setattr__(self, "_by_name", MappingProxyType({f.name: f for f in self.fields}))

    @property
    def required_fields(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields if f.required)

    @property
    def optional_fields(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields if f.mappable and not f.required)

    @property
    def mappable_fields(self) -> tuple[str, ...]:
        """Champs requis puis optionnels, dans l'ordre de déclaration."""
        return self.required_fields + self.optional_fields

    @property
    def aliases(self) -> Mapping[str, tuple[str, ...]]:
        return MappingProxyType({f.name: f.aliases for f in self.fields if f.aliases})

    @property
    def output_fields(self) -> tuple[FieldSpec, ...]:
        """Tous les champs de l'enregistrement produit (mappables puis dérivés)."""
        mappable = [self._by_name[n] for n in self.mappable_fields]
        derived = [f for f in self.fields if not f.mappable]
        return tuple(mappable + derived)

    def get_field(self, name: str) -> FieldSpec:
        return self._by_name[name]

    def is_required(self, name: str) -> bool:
        spec = self._by_name.get(name)
        return spec is not None and spec.required


def _req(name: str, *aliases: str, kind: FieldKind = FieldKind.TEXT, default: Any = None) -> FieldSpec:
    return FieldSpec(name, kind, required=True, aliases=aliases, default=default)


def _opt(name: str, *aliases: str, kind: FieldKind = FieldKind.TEXT, default: Any = None) -> FieldSpec:
    return FieldSpec(name, kind, aliases=aliases, default=default)


def _out(name: str, kind: FieldKind = FieldKind.TEXT, default: Any = None) -> FieldSpec:
    return FieldSpec(name, kind, default=default, mappable=False)


_INT = FieldKind.INTEGER
_NUM = FieldKind.NUMBER
_BOOL = FieldKind.BOOLEAN
_LIST = FieldKind.LIST
_DATE = FieldKind.DATE


TARGETS: tuple[TargetSchema, ...] = (
    TargetSchema(
        "websites",
        "Websites",
        "🌐",
        (
            _req("name", "site", "website", "domain", "siteName", "site_name", "website_name",
                 "domain_name", "hostname", "host", default="Unnamed"),
            _req("url", "link", "href", "siteUrl", "site_url", "website_url", "address", "domain",
                 "homepage", "web", "webpage", "page"),
            _opt("wpAdminUrl", "wp_admin", "wordpress_admin", "admin_url", "wp_url", "wp_admin_url"),
            _opt("wpUsername", "wp_user", "wordpress_user", "admin_user", "wp_login"),
            _opt("wpPassword", "wp_pass", "wordpress_pass", "admin_pass", "wp_pwd"),
            _opt("hostingProvider", "hosting", "host", "provider", "hosting_provider", "hoster"),
            _opt("hostingLoginUrl", "hosting_url", "hosting_login", "host_url"),
            _opt("hostingUsername", "hosting_user", "host_user"),
            _opt("hostingPassword", "hosting_pass", "host_pass", "hosting_pwd"),
            _opt("category", "type", "group", "cat", "kind", default="Personal"),
            _opt("status", "state", "active", default="active"),
            _opt("notes", "note", "comment", "comments", "description", "desc"),
            _opt("plugins", "plugin", "extensions", "addons", kind=_LIST),
            _opt("tags", "tag", "labels", kind=_LIST),
            _out("dateAdded", _DATE),
            _out("lastUpdated", _DATE),
        ),
    ),
    TargetSchema(
        "links",
        "Links",
        "🔗",
        (
            _req("title", "name", "label", "text", "link_name", "bookmark", "link_title", default="Untitled"),
            _req("url", "link", "href", "address", "uri", "source"),
            _opt("category", "type", "group", "folder", "cat", default="Other"),
            _opt("description", "desc", "note", "notes", "comment"),
            _opt("status", "state", default="active"),
            _opt("pinned", "pin", "favorite", "starred", "fav", kind=_BOOL),
            _opt("tags", "tag", "labels", "keywords", kind=_LIST),
            _out("dateAdded", _DATE),
        ),
    ),
    TargetSchema(
        "tasks",
        "Tasks",
        "✅",
        (
            _req("title", "name", "task", "todo", "item", "subject", "task_name", "action", "action_item",
                 default="Untitled"),
            _opt("priority", "prio", "importance", "urgency", "level", default="medium"),
            _opt("status", "state", "done", "completed", "progress", "checked", default="todo"),
            _opt("dueDate", "due", "deadline", "due_date", "duedate", "date", "target_date", "end_date",
                 kind=_DATE),
            _opt("category", "type", "group", "cat", "project", "list", "board", default="General"),
            _opt("description", "desc", "note", "notes", "details", "body", "content"),
            _opt("linkedProject", "project", "linked_project", "projectName"),
            _opt("tags", "tag", "labels", kind=_LIST),
            _out("subtasks", _LIST),
            _out("createdAt", _DATE),
        ),
    ),
    TargetSchema(
        "repos",
        "GitHub Repos",
        "🐙",
        (
            _req("name", "repo", "repository", "repo_name", "project", "full_name", default="unnamed-repo"),
            _opt("url", "link", "href", "github_url", "repo_url", "html_url", "clone_url", "ssh_url"),
            _opt("description", "desc", "about", "summary"),
            _opt("language", "lang", "tech", "primary_language", default="TypeScript"),
            _opt("stars", "star", "stargazers", "stargazers_count", kind=_INT),
            _opt("forks", "fork", "forks_count", kind=_INT),
            _opt("status", "state", "archived", default="active"),
            _opt("demoUrl", "demo", "demo_url", "homepage", "live_url"),
            _opt("progress", "completion", "percent", kind=_INT),
            _opt("topics", "tags", "labels", "keywords", "topic", kind=_LIST),
            _out("lastUpdated", _DATE),
        ),
    ),
    TargetSchema(
        "build_projects",
        "Build Projects",
        "🛠️",
        (
            _req("name", "project", "title", "project_name", "app_name", default="Unnamed"),
            _opt("platform", "tool", "builder", "framework", default="other"),
            _opt("projectUrl", "project_url", "build_url", "url"),
            _opt("deployedUrl", "deployed_url", "live_url", "demo", "production_url"),
            _opt("description", "desc", "about", "summary"),
            _opt("techStack", "tech_stack", "technologies", "stack", "tech", kind=_LIST),
            _opt("status", "state", "phase", default="building"),
            _opt("nextSteps", "next_steps", "todo", "next"),
            _opt("githubRepo", "github_repo", "repo", "github", "repository"),
            _out("startedDate", _DATE),
            _out("lastWorkedOn", _DATE),
        ),
    ),
    TargetSchema(
        "credentials",
        "Credentials",
        "🔐",
        (
            _req("label", "name", "title", "credential_name", "account", "account_name", default="Untitled"),
            _req("service", "provider", "platform", "app", "site", "website"),
            _opt("url", "link", "login_url", "site_url", "address"),
            _opt("username", "user", "login", "email", "user_name", "account_name", "login_email"),
            _opt("password", "pass", "pwd", "secret", "passwd"),
            _opt("apiKey", "api_key", "token", "access_token", "key", "api_token", "secret_key"),
            _opt("notes", "note", "comment", "description", "desc"),
            _opt("category", "type", "group", "cat", default="Other"),
            _opt("tags", "tag", "labels", kind=_LIST),
            _out("createdAt", _DATE),
        ),
    ),
    TargetSchema(
        "payments",
        "Payments",
        "💰",
        (
            _req("title", "name", "description", "item", "payment", "invoice", "label", "memo", "transaction",
                 default="Untitled"),
            _req("amount", "price", "cost", "value", "total", "sum", "fee", "charge", "subtotal", kind=_NUM),
            _opt("currency", "curr", "money_type", "currency_code", default="USD"),
            _opt("type", "kind", "payment_type", "direction", "txn_type", default="expense"),
            _opt("status", "state", "paid", "payment_status", default="pending"),
            _opt("category", "group", "cat", default="Other"),
            _opt("from", "sender", "payer", "source", "client", "buyer"),
            _opt("to", "receiver", "payee", "recipient", "vendor", "seller"),
            _opt("dueDate", "due", "deadline", "due_date", "date", "invoice_date", "payment_date", kind=_DATE),
            _opt("recurring", "repeat", "auto", "subscription", "recur", kind=_BOOL),
            _opt("notes", "note", "comment", "memo", "desc"),
            _out("paidDate"),
            _out("linkedProject"),
            _out("recurringInterval"),
            _out("createdAt", _DATE),
        ),
    ),
    TargetSchema(
        "notes",
        "Notes",
        "📝",
        (
            _req("title", "name", "subject", "heading", "note_title", default="Untitled"),
            _opt("content", "body", "text", "note", "description", "desc", "details", "message"),
            _opt("color", "colour", "theme", default="blue"),
            _opt("pinned", "pin", "favorite", "starred", "fav", kind=_BOOL),
            _opt("tags", "tag", "labels", "keywords", "categories", kind=_LIST),
            _out("createdAt", _DATE),
            _out("updatedAt", _DATE),
        ),
    ),
    TargetSchema(
        "ideas",
        "Ideas",
        "💡",
        (
            _req("title", "name", "idea", "subject", "concept", "proposal", default="Untitled"),
            _opt("description", "desc", "details", "body", "content", "notes"),
            _opt("category", "type", "group", "cat", default="General"),
            _opt("priority", "prio", "importance", default="medium"),
            _opt("status", "state", "phase", default="spark"),
            _opt("tags", "tag", "labels", kind=_LIST),
            _opt("linkedProject", "project", "linked_project"),
            _opt("votes", "vote", "score", "rating", "upvotes", kind=_INT),
            _out("createdAt", _DATE),
            _out("updatedAt", _DATE),
        ),
    ),
    TargetSchema(
        "habits",
        "Habits",
        "🔄",
        (
            _req("name", "habit", "title", "label", "activity", "routine", default="Untitled"),
            _opt("icon", "emoji", default="🎯"),
            _opt("frequency", "freq", "interval", "schedule", "repeat", default="daily"),
            _opt("color", "colour", "theme"),
            _out("completions", _LIST),
            _out("streak", _INT),
            _out("createdAt", _DATE),
        ),
    ),
)

_REGISTRY: Mapping[str, TargetSchema] = MappingProxyType({t.id: t for t in TARGETS})


def target_ids() -> list[str]:
    """Identifiants des cibles, dans l'ordre d'énumération du registre."""
    return [t.id for t in TARGETS]


def get_target(target: str | TargetSchema) -> TargetSchema:
    """
    Retourne la cible d'après son identifiant.

    Raises:
        UnknownTargetError: Si l'identifiant n'est pas enregistré.
    """
    if isinstance(target, TargetSchema):
        return target
    try:
        return _REGISTRY[target]
    except KeyError:
        raise UnknownTargetError(target, suggest_target(target)) from None


def suggest_target(name: str) -> str | None:
    """Identifiant enregistré le plus proche de ``name`` (ou None)."""
    choices = {t.id: norm_field_name(t.id) for t in TARGETS}
    match = process.extractOne(norm_field_name(name), choices, scorer=fuzz.ratio, score_cutoff=60)
    return match[2] if match else None
