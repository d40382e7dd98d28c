"""Git and GitHub collaborators: changed files, event payloads, and PR comments."""

from .diff import DiffCollector, DiffResult, diff_target
from .event import pr_number_from_event
from .publisher import CommentPublisher

__all__ = ["CommentPublisher", "DiffCollector", "DiffResult", "diff_target", "pr_number_from_event"]
