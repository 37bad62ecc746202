from .signal import ObservableProperty, Signal, apply_batch
from .base import BaseViewModel
from .fetch_session import FetchSession, LoadPhase
from .project_list_viewmodel import ListSnapshot, ProjectListViewModel

__all__ = [
    "BaseViewModel",
    "FetchSession",
    "ListSnapshot",
    "LoadPhase",
    "ObservableProperty",
    "ProjectListViewModel",
    "Signal",
    "apply_batch",
]
