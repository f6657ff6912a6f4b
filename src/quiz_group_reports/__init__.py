#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
.. $Id$
"""

import zope.i18nmessageid
MessageFactory = zope.i18nmessageid.MessageFactory(__name__)

VIEW_QUIZ_GROUP_REPORT = 'GroupReport'

#: Which attempts to include in the report.
ENROLLED_WITH = 'enrolled_with'
ENROLLED_NEEDS_GRADING = 'enrolled_needs_grading'
ENROLLED_WITHOUT = 'enrolled_without'
ENROLLED_ALL = 'enrolled_any'
ALL_WITH = 'all_with'

ATTEMPTS_MODES = (ENROLLED_WITH, ENROLLED_NEEDS_GRADING, ENROLLED_WITHOUT,
                  ENROLLED_ALL, ALL_WITH)

#: Which tries of each question to show.
FIRST_TRY = 'firsttry'
ALL_TRIES = 'all'
LAST_TRY = 'lasttry'

WHICH_TRIES = (FIRST_TRY, ALL_TRIES, LAST_TRY)

DEFAULT_PAGE_SIZE = 30

#: The user may not see any group in separate groups mode.
NO_GROUPS_ALLOWED = -2

#: Activity group modes
NOGROUPS = 0
SEPARATEGROUPS = 1
VISIBLEGROUPS = 2

#: Grading methods
GRADEHIGHEST = 1
GRADEAVERAGE = 2
ATTEMPTFIRST = 3
ATTEMPTLAST = 4

#: Attempt states
STATE_IN_PROGRESS = 'inprogress'
STATE_FINISHED = 'finished'

#: Capabilities an eligible student holds
CAP_ATTEMPT = 'quiz.attempt'
CAP_REVIEW_OWN_ATTEMPTS = 'quiz.review_own_attempts'

STUDENT_CAPABILITIES = (CAP_ATTEMPT, CAP_REVIEW_OWN_ATTEMPTS)
