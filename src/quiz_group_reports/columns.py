#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Column planning for the group report.

.. $Id$
"""

from collections import namedtuple

from quiz_group_reports import MessageFactory as _

from quiz_group_reports.utils import format_grade

logger = __import__('logging').getLogger(__name__)

ColumnPlan = namedtuple('ColumnPlan', ('columns', 'headers'))

#: An optional per-question column: the option flag that enables it, the
#: prefix of its id, the response try attribute it shows and its header.
QuestionColumn = namedtuple('QuestionColumn', ('flag', 'prefix', 'field', 'header'))


def _question_header(question):
    return _(u'Question ${number}', mapping={'number': question.number})


def _response_header(question):
    return _(u'Response ${number}', mapping={'number': question.number})


def _right_answer_header(question):
    return _(u'Right answer ${number}', mapping={'number': question.number})


QUESTION_COLUMNS = (
    QuestionColumn('showqtext', 'question', 'question_summary', _question_header),
    QuestionColumn('showresponses', 'response', 'response_summary', _response_header),
    QuestionColumn('showright', 'right', 'right_answer', _right_answer_header),
)


def question_column_id(column, question):
    return '%s%s' % (column.prefix, question.id)


def user_columns():
    return [('fullname', _(u'Name'))]


def grade_columns(activity, can_see_grades):
    """
    The grade related columns, ``sumgrades`` and, if the quiz has overall
    feedback, ``feedbacktext``.
    """
    if not can_see_grades or activity is None:
        return []
    maxgrade = format_grade(activity, activity.grade)
    result = [('sumgrades', _(u'Grade/${maxgrade}', mapping={'maxgrade': maxgrade}))]
    if activity.has_feedback:
        result.append(('feedbacktext', _(u'Feedback')))
    return result


def question_columns(options, questions):
    for question in questions:
        for column in QUESTION_COLUMNS:
            if getattr(options, column.flag):
                yield question_column_id(column, question), column.header(question)


def plan_columns(options, questions, can_see_grades):
    """
    Return the ordered :class:`ColumnPlan` for the report.

    Questions are taken in the given order. For each question the enabled
    text, response and right answer columns follow, in that order.
    """
    columns = []
    headers = []
    planned = user_columns()
    planned.extend(grade_columns(options.activity, can_see_grades))
    planned.extend(question_columns(options, questions))
    for column, header in planned:
        columns.append(column)
        headers.append(header)
    return ColumnPlan(columns, headers)
