# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .email import SendGridEmailNotifier

__all__ = ["SendGridEmailNotifier"]
