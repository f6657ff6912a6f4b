#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
The attempts tables of the group report.

Two tables share the same SQL and configuration and differ only in which
try of each question they show: :class:`LastResponsesTable` shows the last
try, :class:`FirstOrAllResponsesTable` shows the first try or one row per
try. :func:`table_class_for` picks one from the ``whichtries`` option.

.. $Id$
"""

from collections import namedtuple

from zope import component

from zope.cachedescriptors.property import Lazy

from quiz_group_reports import ALL_WITH
from quiz_group_reports import LAST_TRY
from quiz_group_reports import ALL_TRIES
from quiz_group_reports import FIRST_TRY
from quiz_group_reports import ENROLLED_ALL
from quiz_group_reports import STATE_FINISHED
from quiz_group_reports import ENROLLED_WITHOUT
from quiz_group_reports import STATE_IN_PROGRESS
from quiz_group_reports import ENROLLED_NEEDS_GRADING

from quiz_group_reports.columns import QUESTION_COLUMNS
from quiz_group_reports.columns import question_column_id

from quiz_group_reports.interfaces import IResponseSummaries

from quiz_group_reports.utils import format_grade
from quiz_group_reports.utils import rescale_grade

logger = __import__('logging').getLogger(__name__)

#: Identifies one row: a user and one of their attempts (0 for none).
UNIQUEID_SQL = "u.id || '#' || COALESCE(quiza.attempt, 0)"

FormattedRow = namedtuple('FormattedRow', ('cells', 'css_class'))


class AbstractResponsesTable(object):
    """
    A sortable, pageable table of attempts.

    The table holds the configuration an external renderer needs (columns,
    headers, sorting, paging, SQL) and knows how to turn fetched rows into
    cells.
    """

    def __init__(self, activity, options, questions, qmsubselect='', summaries=None):
        self.activity = activity
        self.options = options
        self.questions = list(questions)
        self.qmsubselect = qmsubselect
        self._summaries = summaries

        self.columns = []
        self.headers = []
        self.is_sortable = False
        self.default_sort = None
        self.unsortable = set()
        self.baseurl = None
        self.column_classes = {}
        self.attributes = {}
        self.is_collapsible = False
        self.suppressed = set()
        self.pagesize = None
        self.sql = None
        self.count_sql = None

    @Lazy
    def summaries(self):
        if self._summaries is None:
            return component.getUtility(IResponseSummaries)
        return self._summaries

    @Lazy
    def question_columns(self):
        result = {}
        for question in self.questions:
            for column in QUESTION_COLUMNS:
                result[question_column_id(column, question)] = (column.field, question)
        return result

    @property
    def is_downloading(self):
        return self.options.is_downloading

    # Configuration

    def define_columns(self, columns):
        self.columns = list(columns)

    def define_headers(self, headers):
        self.headers = list(headers)

    def sortable(self, flag, default_column=None):
        self.is_sortable = flag
        self.default_sort = default_column

    def no_sorting(self, column):
        self.unsortable.add(column)

    def column_is_sortable(self, column):
        return self.is_sortable and column not in self.unsortable

    def define_baseurl(self, url):
        self.baseurl = url

    def column_class(self, column, css_class):
        self.column_classes[column] = css_class

    def column_suppress(self, column):
        self.suppressed.add(column)

    def set_attribute(self, name, value):
        self.attributes[name] = value

    def collapsible(self, flag):
        self.is_collapsible = flag

    def set_pagesize(self, pagesize):
        self.pagesize = pagesize

    def set_sql(self, fields, from_sql, where, params):
        self.sql = (fields, from_sql, where, dict(params))

    def set_count_sql(self, sql, params):
        self.count_sql = (sql, dict(params))

    # SQL

    def base_fields(self):
        fields = ['DISTINCT %s AS uniqueid' % UNIQUEID_SQL]
        if self.qmsubselect:
            fields.append('(CASE WHEN %s THEN 1 ELSE 0 END) AS gradedattempt' % self.qmsubselect)
        fields.extend(('quiza.uniqueid AS usageid',
                       'quiza.id AS attempt',
                       'u.id AS userid',
                       'u.firstname',
                       'u.lastname',
                       'quiza.state',
                       'quiza.sumgrades',
                       'quiza.timefinish',
                       'quiza.timestart',
                       'CASE WHEN quiza.timefinish = 0 THEN NULL '
                       'WHEN quiza.timefinish > quiza.timestart '
                       'THEN quiza.timefinish - quiza.timestart ELSE 0 END AS duration'))
        return ',\n'.join(fields)

    def base_sql(self, allowed_join):
        """
        Return ``(fields, from, where, params)`` selecting one row per
        user and attempt for the attempts mode of the options.
        """
        fields = self.base_fields()
        from_sql = ('users u\n'
                    'LEFT JOIN quiz_attempts quiza ON quiza.userid = u.id '
                    'AND quiza.quiz = :quizid')
        params = {'quizid': self.activity.id}

        if self.qmsubselect and self.options.onlygraded:
            from_sql += ' AND (quiza.state <> :finishedstate OR %s)' % self.qmsubselect
            params['finishedstate'] = STATE_FINISHED

        attempts = self.options.attempts
        if attempts == ALL_WITH:
            where = 'quiza.id IS NOT NULL AND quiza.preview = 0'
            return fields, from_sql, where, params

        if allowed_join.joins:
            from_sql += '\n' + allowed_join.joins
        if allowed_join.cannot_match_any_rows:
            student_where = '1 = 0'
        else:
            student_where = allowed_join.wheres or '1 = 1'
        params.update(allowed_join.params)

        if attempts == ENROLLED_WITHOUT:
            where = 'quiza.id IS NULL AND ' + student_where
        elif attempts == ENROLLED_ALL:
            where = '(quiza.preview = 0 OR quiza.preview IS NULL) AND ' + student_where
        elif attempts == ENROLLED_NEEDS_GRADING:
            where = ('quiza.preview = 0 AND quiza.id IS NOT NULL '
                     'AND quiza.state = :gradingstate AND quiza.sumgrades IS NULL AND '
                     + student_where)
            params['gradingstate'] = STATE_FINISHED
        else:  # enrolled_with
            where = 'quiza.preview = 0 AND quiza.id IS NOT NULL AND ' + student_where
        return fields, from_sql, where, params

    def count_select(self):
        return 'COUNT(DISTINCT %s)' % UNIQUEID_SQL

    # Rows

    def _tries(self, row, question):
        return self.summaries.tries(row['usageid'], question.id)

    def _expand_rows(self, rawrows):
        raise NotImplementedError()

    def _response_try(self, row, question):
        raise NotImplementedError()

    def format_rows(self, rawrows):
        return [self.format_row(row) for row in self._expand_rows(rawrows)]

    def format_row(self, row):
        cells = {}
        for column in self.columns:
            formatter = getattr(self, 'col_' + column, None)
            if formatter is not None:
                cells[column] = formatter(row)
            else:
                cells[column] = self.other_cols(column, row)
        return FormattedRow(cells, self.get_row_class(row))

    def get_row_class(self, row):
        if self.qmsubselect and row.get('gradedattempt'):
            return 'gradedattempt'
        return ''

    def col_fullname(self, row):
        name = u'%s %s' % (row.get('firstname') or '', row.get('lastname') or '')
        return name.strip()

    def _final_grade(self, row):
        if row.get('state') != STATE_FINISHED:
            return None
        return rescale_grade(row.get('sumgrades'), self.activity)

    def col_sumgrades(self, row):
        return format_grade(self.activity, self._final_grade(row))

    def col_feedbacktext(self, row):
        grade = self._final_grade(row)
        if grade is None:
            return '-'
        return self.activity.feedback_for_grade(grade)

    def other_cols(self, column, row):
        try:
            field, question = self.question_columns[column]
        except KeyError:
            return None
        if not row.get('usageid'):
            return '-'
        response_try = self._response_try(row, question)
        if response_try is None:
            return ''
        return getattr(response_try, field, None) or ''


class LastResponsesTable(AbstractResponsesTable):
    """
    One row per attempt showing the last try of each question.
    """

    def _expand_rows(self, rawrows):
        return list(rawrows)

    def _response_try(self, row, question):
        tries = self._tries(row, question)
        return tries[-1] if tries else None


class FirstOrAllResponsesTable(AbstractResponsesTable):
    """
    One row per try of an attempt, or only the row of the first try.
    """

    def _expand_rows(self, rawrows):
        first_only = self.options.whichtries == FIRST_TRY
        result = []
        for row in rawrows:
            if not row.get('usageid'):
                result.append(row)
                continue
            maxtries = max([len(self._tries(row, q)) for q in self.questions] + [1])
            if first_only:
                maxtries = 1
            for try_number in range(1, maxtries + 1):
                newrow = dict(row)
                newrow['try'] = try_number
                newrow['lasttryforallparts'] = try_number == maxtries
                if try_number != maxtries:
                    newrow['state'] = STATE_IN_PROGRESS
                result.append(newrow)
        return result

    def _response_try(self, row, question):
        tries = self._tries(row, question)
        index = row.get('try', 1) - 1
        return tries[index] if index < len(tries) else None

    def col_fullname(self, row):
        if row.get('try', 1) > 1:
            return ''
        return super(FirstOrAllResponsesTable, self).col_fullname(row)


TABLE_CLASSES = {
    LAST_TRY: LastResponsesTable,
    FIRST_TRY: FirstOrAllResponsesTable,
    ALL_TRIES: FirstOrAllResponsesTable,
}


def table_class_for(whichtries):
    return TABLE_CLASSES[whichtries]
