"""Data transfer objects mirrored from the review backend.

Every model is a flat dataclass built from the backend's JSON with
from_dict(). Missing keys fall back to empty values so a partially filled
response never breaks rendering. Request bodies go the other way through
to_dict(); write-only secrets (access_token, api_key) are dropped from the
body when blank so the backend keeps the value it already has.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


def _int(value, default: int = 0) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _float(value, default: float = 0.0) -> float:
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _opt_int(value) -> int | None:
    return None if value is None else _int(value)


def _list(value) -> list:
    return value if isinstance(value, list) else []


# --------------------------------------------------------------------------- #
# Auth                                                                         #
# --------------------------------------------------------------------------- #


@dataclass
class User:
    id: int
    username: str
    email: str = ""
    is_active: bool = True
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_dict(cls, d: dict | None) -> User:
        d = d or {}
        return cls(
            id=_int(d.get("id")),
            username=d.get("username", ""),
            email=d.get("email", ""),
            is_active=bool(d.get("is_active", True)),
            created_at=d.get("created_at") or "",
            updated_at=d.get("updated_at") or "",
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "is_active": self.is_active,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@dataclass
class LoginResponse:
    token: str
    user: User

    @classmethod
    def from_dict(cls, d: dict | None) -> LoginResponse:
        d = d or {}
        return cls(token=d.get("token", ""), user=User.from_dict(d.get("user") or {}))


# --------------------------------------------------------------------------- #
# Settings                                                                     #
# --------------------------------------------------------------------------- #


@dataclass
class GitPlatformConfig:
    platform_type: str
    base_url: str
    access_token: str = ""  # write-only
    webhook_secret: str = ""
    is_active: bool = True
    id: int | None = None
    last_tested_at: str | None = None
    last_test_status: str | None = None
    last_test_message: str | None = None

    @classmethod
    def from_dict(cls, d: dict | None) -> GitPlatformConfig:
        d = d or {}
        return cls(
            id=_opt_int(d.get("id")),
            platform_type=d.get("platform_type", ""),
            base_url=d.get("base_url", ""),
            access_token=d.get("access_token") or "",
            webhook_secret=d.get("webhook_secret") or "",
            is_active=bool(d.get("is_active", True)),
            last_tested_at=d.get("last_tested_at"),
            last_test_status=d.get("last_test_status"),
            last_test_message=d.get("last_test_message"),
        )

    def to_dict(self) -> dict:
        body = {
            "platform_type": self.platform_type,
            "base_url": self.base_url,
            "is_active": self.is_active,
        }
        if self.access_token:
            body["access_token"] = self.access_token
        if self.webhook_secret:
            body["webhook_secret"] = self.webhook_secret
        return body


@dataclass
class LLMProvider:
    name: str
    base_url: str
    model: str
    api_key: str = ""  # write-only
    is_active: bool = True
    id: int | None = None
    last_tested_at: str | None = None
    last_test_status: str | None = None
    last_test_message: str | None = None

    @classmethod
    def from_dict(cls, d: dict | None) -> LLMProvider:
        d = d or {}
        return cls(
            id=_opt_int(d.get("id")),
            name=d.get("name", ""),
            base_url=d.get("base_url", ""),
            model=d.get("model", ""),
            api_key=d.get("api_key") or "",
            is_active=bool(d.get("is_active", True)),
            last_tested_at=d.get("last_tested_at"),
            last_test_status=d.get("last_test_status"),
            last_test_message=d.get("last_test_message"),
        )

    def to_dict(self) -> dict:
        body = {
            "name": self.name,
            "base_url": self.base_url,
            "model": self.model,
            "is_active": self.is_active,
        }
        if self.api_key:
            body["api_key"] = self.api_key
        return body


@dataclass
class SystemWebhookConfig:
    webhook_callback_url: str = ""
    webhook_secret: str = ""

    @classmethod
    def from_dict(cls, d: dict | None) -> SystemWebhookConfig:
        d = d or {}
        return cls(
            webhook_callback_url=d.get("webhook_callback_url") or "",
            webhook_secret=d.get("webhook_secret") or "",
        )

    def to_dict(self) -> dict:
        body = {"webhook_callback_url": self.webhook_callback_url}
        if self.webhook_secret:
            body["webhook_secret"] = self.webhook_secret
        return body


@dataclass
class TestResult:
    """Outcome of a connection, provider or webhook test.

    Endpoints disagree on shape: some answer {success: bool}, the webhook
    test answers {status: "success" | "failed"}. Both collapse into success.
    """

    __test__ = False  # not a pytest class

    success: bool
    message: str = ""

    @classmethod
    def from_dict(cls, d: dict | None) -> TestResult:
        d = d or {}
        if "success" in d:
            success = bool(d.get("success"))
        else:
            success = d.get("status") == "success"
        return cls(success=success, message=d.get("message") or "")


@dataclass
class Message:
    """Plain acknowledgement body: {"message": "...", "count": n}."""

    message: str = ""
    count: int | None = None

    @classmethod
    def from_dict(cls, d: dict | None) -> Message:
        d = d or {}
        return cls(message=d.get("message") or "", count=_opt_int(d.get("count")))


# --------------------------------------------------------------------------- #
# Repositories                                                                 #
# --------------------------------------------------------------------------- #


@dataclass
class Repository:
    id: int
    name: str
    full_path: str
    platform_id: int = 0
    platform_repo_id: int = 0
    http_url: str = ""
    ssh_url: str = ""
    default_branch: str = ""
    llm_provider_id: int | None = None
    llm_provider: LLMProvider | None = None
    webhook_id: int | None = None
    webhook_url: str = ""
    last_webhook_test_status: str | None = None
    last_webhook_test_at: str | None = None
    last_webhook_test_error: str | None = None
    is_active: bool = True
    created_at: str = ""

    @classmethod
    def from_dict(cls, d: dict | None) -> Repository:
        d = d or {}
        provider = d.get("llm_provider")
        return cls(
            id=_int(d.get("id")),
            name=d.get("name", ""),
            full_path=d.get("full_path", ""),
            platform_id=_int(d.get("platform_id")),
            platform_repo_id=_int(d.get("platform_repo_id")),
            http_url=d.get("http_url") or "",
            ssh_url=d.get("ssh_url") or "",
            default_branch=d.get("default_branch") or "",
            llm_provider_id=_opt_int(d.get("llm_provider_id")),
            llm_provider=LLMProvider.from_dict(provider) if isinstance(provider, dict) else None,
            webhook_id=_opt_int(d.get("webhook_id")) or None,
            webhook_url=d.get("webhook_url") or "",
            last_webhook_test_status=d.get("last_webhook_test_status"),
            last_webhook_test_at=d.get("last_webhook_test_at"),
            last_webhook_test_error=d.get("last_webhook_test_error"),
            is_active=bool(d.get("is_active", True)),
            created_at=d.get("created_at") or "",
        )


@dataclass
class GitLabRepository:
    """A project on the Git host that can be imported."""

    id: int
    name: str
    full_path: str
    http_url: str = ""
    ssh_url: str = ""
    default_branch: str = ""
    description: str = ""

    @classmethod
    def from_dict(cls, d: dict | None) -> GitLabRepository:
        d = d or {}
        return cls(
            id=_int(d.get("id")),
            name=d.get("name", ""),
            full_path=d.get("full_path", ""),
            http_url=d.get("http_url") or "",
            ssh_url=d.get("ssh_url") or "",
            default_branch=d.get("default_branch") or "",
            description=d.get("description") or "",
        )


@dataclass
class Page(Generic[T]):
    items: list[T]
    page: int = 1
    page_size: int = 20
    total: int = 0

    @property
    def total_pages(self) -> int:
        if self.page_size <= 0:
            return 1
        return max(1, -(-self.total // self.page_size))


# --------------------------------------------------------------------------- #
# Reviews                                                                      #
# --------------------------------------------------------------------------- #


@dataclass
class RepositoryRef:
    id: int = 0
    name: str = ""
    full_path: str = ""

    @classmethod
    def from_dict(cls, d: dict | None) -> RepositoryRef:
        d = d or {}
        return cls(id=_int(d.get("id")), name=d.get("name") or "", full_path=d.get("full_path") or "")


@dataclass
class FixSuggestion:
    file_path: str
    severity: str
    description: str
    line_start: int = 0
    line_end: int = 0
    category: str = ""
    suggestion: str = ""
    code_snippet: str | None = None
    id: int = 0

    @classmethod
    def from_dict(cls, d: dict | None) -> FixSuggestion:
        d = d or {}
        return cls(
            id=_int(d.get("id")),
            file_path=d.get("file_path", ""),
            line_start=_int(d.get("line_start")),
            line_end=_int(d.get("line_end")),
            severity=d.get("severity", ""),
            category=d.get("category") or "",
            description=d.get("description", ""),
            suggestion=d.get("suggestion") or "",
            code_snippet=d.get("code_snippet") or None,
        )

    @property
    def line_range(self) -> str:
        if self.line_end and self.line_end != self.line_start:
            return f"{self.line_start}-{self.line_end}"
        return str(self.line_start)


@dataclass
class Review:
    id: int
    status: str
    repository: RepositoryRef = field(default_factory=RepositoryRef)
    mr_iid: int = 0
    mr_title: str = ""
    mr_author: str = ""
    mr_web_url: str = ""
    source_branch: str = ""
    target_branch: str = ""
    score: int = 0
    issues_found: int = 0
    critical_issues_count: int = 0
    high_issues_count: int = 0
    medium_issues_count: int = 0
    low_issues_count: int = 0
    security_issues_count: int = 0
    performance_issues_count: int = 0
    quality_issues_count: int = 0
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0
    llm_duration_ms: int = 0
    summary: str = ""
    fix_suggestions: list[FixSuggestion] = field(default_factory=list)
    comment_posted: bool = False
    comment_url: str | None = None
    error_message: str | None = None
    created_at: str = ""
    reviewed_at: str | None = None

    @classmethod
    def from_dict(cls, d: dict | None) -> Review:
        d = d or {}
        return cls(
            id=_int(d.get("id")),
            status=d.get("status", ""),
            repository=RepositoryRef.from_dict(d.get("repository")),
            mr_iid=_int(d.get("mr_iid")),
            mr_title=d.get("mr_title") or "",
            mr_author=d.get("mr_author") or "",
            mr_web_url=d.get("mr_web_url") or "",
            source_branch=d.get("source_branch") or "",
            target_branch=d.get("target_branch") or "",
            score=_int(d.get("score")),
            issues_found=_int(d.get("issues_found")),
            critical_issues_count=_int(d.get("critical_issues_count")),
            high_issues_count=_int(d.get("high_issues_count")),
            medium_issues_count=_int(d.get("medium_issues_count")),
            low_issues_count=_int(d.get("low_issues_count")),
            security_issues_count=_int(d.get("security_issues_count")),
            performance_issues_count=_int(d.get("performance_issues_count")),
            quality_issues_count=_int(d.get("quality_issues_count")),
            prompt_tokens=_int(d.get("prompt_tokens")),
            completion_tokens=_int(d.get("completion_tokens")),
            total_tokens=_int(d.get("total_tokens")),
            llm_duration_ms=_int(d.get("llm_duration_ms")),
            summary=d.get("summary") or "",
            fix_suggestions=[FixSuggestion.from_dict(s) for s in _list(d.get("fix_suggestions"))],
            comment_posted=bool(d.get("comment_posted", False)),
            comment_url=d.get("comment_url") or None,
            error_message=d.get("error_message") or None,
            created_at=d.get("created_at") or "",
            reviewed_at=d.get("reviewed_at"),
        )


# --------------------------------------------------------------------------- #
# Dashboard                                                                    #
# --------------------------------------------------------------------------- #


@dataclass
class DashboardStats:
    total_reviews: int = 0
    completed_reviews: int = 0
    pending_reviews: int = 0
    failed_reviews: int = 0
    average_score: float = 0.0
    total_issues_found: int = 0
    critical_issues: int = 0
    high_issues: int = 0
    medium_issues: int = 0
    low_issues: int = 0
    security_issues: int = 0
    performance_issues: int = 0
    quality_issues: int = 0

    @classmethod
    def from_dict(cls, d: dict | None) -> DashboardStats:
        d = d or {}
        return cls(
            total_reviews=_int(d.get("total_reviews")),
            completed_reviews=_int(d.get("completed_reviews")),
            pending_reviews=_int(d.get("pending_reviews")),
            failed_reviews=_int(d.get("failed_reviews")),
            average_score=_float(d.get("average_score")),
            total_issues_found=_int(d.get("total_issues_found")),
            critical_issues=_int(d.get("critical_issues")),
            high_issues=_int(d.get("high_issues")),
            medium_issues=_int(d.get("medium_issues")),
            low_issues=_int(d.get("low_issues")),
            security_issues=_int(d.get("security_issues")),
            performance_issues=_int(d.get("performance_issues")),
            quality_issues=_int(d.get("quality_issues")),
        )

    @property
    def severity_total(self) -> int:
        return self.critical_issues + self.high_issues + self.medium_issues + self.low_issues

    @property
    def category_total(self) -> int:
        return self.security_issues + self.performance_issues + self.quality_issues


@dataclass
class TrendPoint:
    date: str
    review_count: int = 0
    average_score: float = 0.0
    total_issues: int = 0
    critical_issues: int = 0

    @classmethod
    def from_dict(cls, d: dict | None) -> TrendPoint:
        d = d or {}
        return cls(
            date=d.get("date", ""),
            review_count=_int(d.get("review_count")),
            average_score=_float(d.get("average_score")),
            total_issues=_int(d.get("total_issues")),
            critical_issues=_int(d.get("critical_issues")),
        )


@dataclass
class TokenUsageSummary:
    total_calls: int = 0
    successful_calls: int = 0
    failed_calls: int = 0
    total_tokens: int = 0
    prompt_tokens: int = 0
    completion_tokens: int = 0
    avg_duration_ms: float = 0.0
    success_rate: float = 0.0

    @classmethod
    def from_dict(cls, d: dict | None) -> TokenUsageSummary:
        d = d or {}
        return cls(
            total_calls=_int(d.get("total_calls")),
            successful_calls=_int(d.get("successful_calls")),
            failed_calls=_int(d.get("failed_calls")),
            total_tokens=_int(d.get("total_tokens")),
            prompt_tokens=_int(d.get("prompt_tokens")),
            completion_tokens=_int(d.get("completion_tokens")),
            avg_duration_ms=_float(d.get("avg_duration_ms")),
            success_rate=_float(d.get("success_rate")),
        )


@dataclass
class RepositoryTokenUsage:
    repository_id: int
    repository_name: str = ""
    total_tokens: int = 0
    review_count: int = 0
    avg_tokens: float = 0.0

    @classmethod
    def from_dict(cls, d: dict | None) -> RepositoryTokenUsage:
        d = d or {}
        return cls(
            repository_id=_int(d.get("repository_id")),
            repository_name=d.get("repository_name") or "",
            total_tokens=_int(d.get("total_tokens")),
            review_count=_int(d.get("review_count")),
            avg_tokens=_float(d.get("avg_tokens")),
        )

    @property
    def display_name(self) -> str:
        return self.repository_name or f"Repository #{self.repository_id}"


@dataclass
class DailyTokenUsage:
    date: str
    total_tokens: int = 0
    review_count: int = 0
    avg_duration_ms: float = 0.0
    success_rate: float = 0.0

    @classmethod
    def from_dict(cls, d: dict | None) -> DailyTokenUsage:
        d = d or {}
        return cls(
            date=d.get("date", ""),
            total_tokens=_int(d.get("total_tokens")),
            review_count=_int(d.get("review_count")),
            avg_duration_ms=_float(d.get("avg_duration_ms")),
            success_rate=_float(d.get("success_rate")),
        )


@dataclass
class TokenUsage:
    summary: TokenUsageSummary = field(default_factory=TokenUsageSummary)
    top_repositories: list[RepositoryTokenUsage] = field(default_factory=list)
    daily_trend: list[DailyTokenUsage] = field(default_factory=list)

    @classmethod
    def from_dict(cls, d: dict | None) -> TokenUsage:
        d = d or {}
        return cls(
            summary=TokenUsageSummary.from_dict(d.get("summary")),
            top_repositories=[RepositoryTokenUsage.from_dict(r) for r in _list(d.get("top_repositories"))],
            daily_trend=[DailyTokenUsage.from_dict(t) for t in _list(d.get("daily_trend"))],
        )


@dataclass
class HealthStatus:
    status: str
    time: str = ""
    database: str = ""
    version: str = ""

    @classmethod
    def from_dict(cls, d: dict | None) -> HealthStatus:
        d = d or {}
        return cls(
            status=d.get("status", "unknown"),
            time=d.get("time") or "",
            database=d.get("database") or "",
            version=d.get("version") or "",
        )
