#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
.. $Id$
"""

from collections import namedtuple

from quiz_group_reports import MessageFactory as _

from quiz_group_reports import ALL_WITH

from quiz_group_reports.joins import StudentJoin

logger = __import__('logging').getLogger(__name__)

DEFAULT_SORT_COLUMN = 'uniqueid'

UNSORTABLE_COLUMN = 'feedbacktext'

NOTICE_NO_QUESTIONS = _(u'This quiz has no questions yet.')
NOTICE_NO_STUDENTS = _(u'No students enrolled yet')
NOTICE_NO_GROUP_STUDENTS = _(u'No students in this group yet')


class ReportScope(namedtuple('ReportScope', ('fields', 'from_sql', 'where', 'params',
                                             'count_select'))):
    """
    The scoped query of the report. The main and count queries share the
    from clause, the conditions and the parameters.
    """

    __slots__ = ()

    @property
    def sql(self):
        return 'SELECT %s FROM %s WHERE %s' % (self.fields, self.from_sql, self.where)

    @property
    def count_sql(self):
        return 'SELECT %s FROM %s WHERE %s' % (self.count_select, self.from_sql, self.where)


class AttemptTableAssembler(object):
    """
    Configures an attempts table and produces its :class:`ReportScope`.
    """

    def assemble(self, table, allowed_join, columns, headers, options):
        if options.attempts == ALL_WITH:
            # Only kept by the options for users that can access all groups
            allowed_join = StudentJoin()

        fields, from_sql, where, params = table.base_sql(allowed_join)
        scope = ReportScope(fields, from_sql, where, params, table.count_select())

        table.set_count_sql(scope.count_sql, params)
        table.set_sql(fields, from_sql, where, params)

        table.define_columns(columns)
        table.define_headers(headers)
        table.sortable(True, DEFAULT_SORT_COLUMN)
        table.define_baseurl(options.get_url())

        table.column_suppress('fullname')
        table.column_class('fullname', 'bold')
        table.no_sorting(UNSORTABLE_COLUMN)
        table.column_class('sumgrades', 'bold')

        table.set_attribute('id', 'group')
        table.collapsible(True)
        table.set_pagesize(options.pagesize)
        return scope


def assemble(table, allowed_join, columns, headers, options):
    return AttemptTableAssembler().assemble(table, allowed_join, columns, headers, options)


def choose_notice(has_questions, has_students, current_group, has_group_students):
    """
    The notice to show instead of (or above) the table, or None. Checked in
    priority order, at most one applies.
    """
    if not has_questions:
        return NOTICE_NO_QUESTIONS
    if not has_students:
        return NOTICE_NO_STUDENTS
    if current_group and not has_group_students:
        return NOTICE_NO_GROUP_STUDENTS
    return None
