#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
.. $Id$
"""

import re

from quiz_group_reports import MessageFactory as _

from quiz_group_reports import ATTEMPTLAST
from quiz_group_reports import ATTEMPTFIRST
from quiz_group_reports import GRADEAVERAGE
from quiz_group_reports import GRADEHIGHEST
from quiz_group_reports import STATE_FINISHED

logger = __import__('logging').getLogger(__name__)

_TRUE_VALUES = ('1', 'true', 'yes', 'on')
_FALSE_VALUES = ('0', 'false', 'no', 'off', '')


def parse_bool(value, default):
    """
    Coerce a submitted value to a bool, returning ``default`` for anything
    unrecognised.
    """
    if isinstance(value, bool):
        return value
    if value is None:
        return default
    if isinstance(value, int):
        return bool(value)
    value = str(value).strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    return default


def parse_positive_int(value, default):
    try:
        value = int(value)
    except (TypeError, ValueError):
        return default
    return value if value >= 1 else default


def parse_int(value, default=0):
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def grading_method_filter(activity, alias='quiza'):
    """
    Return a SQL condition true for the attempt that gives each user their
    grade, or the empty string when every attempt counts (single attempt
    quizzes and averaged grades).
    """
    if activity.attempts == 1:
        return ''
    method = activity.grademethod
    if method == GRADEHIGHEST:
        better = ("(COALESCE(qa2.sumgrades, 0) > COALESCE({a}.sumgrades, 0) OR "
                  "(COALESCE(qa2.sumgrades, 0) = COALESCE({a}.sumgrades, 0) AND "
                  "qa2.attempt < {a}.attempt))")
    elif method == ATTEMPTFIRST:
        better = "qa2.attempt < {a}.attempt"
    elif method == ATTEMPTLAST:
        better = "qa2.attempt > {a}.attempt"
    else:
        return ''
    sql = ("({a}.state = '%s' AND NOT EXISTS ("
           "SELECT 1 FROM quiz_attempts qa2 "
           "WHERE qa2.quiz = {a}.quiz AND qa2.userid = {a}.userid AND "
           "qa2.state = '%s' AND %s))") % (STATE_FINISHED, STATE_FINISHED, better)
    return sql.format(a=alias)


def can_filter_only_graded(activity):
    return activity.attempts != 1 and activity.grademethod != GRADEAVERAGE


GRADING_METHOD_NAMES = {
    GRADEHIGHEST: _(u'Highest grade'),
    GRADEAVERAGE: _(u'Average grade'),
    ATTEMPTFIRST: _(u'First attempt'),
    ATTEMPTLAST: _(u'Last attempt'),
}


def grading_method_highlight(activity, onlygraded):
    """
    The notice explaining which attempt carries each user's grade, or None
    when the grading method does not single one out.
    """
    if not grading_method_filter(activity):
        return None
    method = GRADING_METHOD_NAMES.get(activity.grademethod)
    if onlygraded:
        return _(u'Only showing the graded attempt for each user (${method}).',
                 mapping={'method': method})
    return _(u'The attempt that gains the grade for each user is highlighted (${method}).',
             mapping={'method': method})


def rescale_grade(sumgrades, activity):
    """
    Scale a raw sum of marks to the quiz's maximum grade.
    """
    if sumgrades is None:
        return None
    if not activity.sumgrades:
        return 0
    return sumgrades * activity.grade / activity.sumgrades


def format_grade(activity, grade):
    if grade is None:
        return '-'
    places = getattr(activity, 'decimalpoints', None)
    places = 2 if places is None else places
    return '%.*f' % (places, grade)


_UNSAFE_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1f]+')


def safe_filename(name):
    return _UNSAFE_CHARS.sub('_', name).strip()


def download_filename(report_name, course, activity):
    name = u'%s - %s - %s' % (course.shortname, activity.name, report_name)
    return safe_filename(name)


def activity_has_grades(activity):
    return (activity.grade or 0) >= 0.000005 and (activity.sumgrades or 0) >= 0.000005
