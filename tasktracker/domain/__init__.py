# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .exceptions import InvariantViolation
from .tasks.entities import NewTask, Priority, Task, TaskChanges, TaskQuery, TaskSort
from .users.entities import IssuedSession, ResetTicket, SessionClaims, SessionCookie, User

__all__ = [
    "InvariantViolation",
    "IssuedSession",
    "NewTask",
    "Priority",
    "ResetTicket",
    "SessionClaims",
    "SessionCookie",
    "Task",
    "TaskChanges",
    "TaskQuery",
    "TaskSort",
    "User",
]
