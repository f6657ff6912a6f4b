#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
The quiz group report.

For each student (optionally only those of one group) this report lists
some combination of the question each student saw, the response they gave,
and the right answer.

.. $Id$
"""

from zope import component

from zope.cachedescriptors.property import Lazy

from quiz_group_reports import MessageFactory as _

from quiz_group_reports import ALL_WITH
from quiz_group_reports import SEPARATEGROUPS

from quiz_group_reports.assembler import choose_notice
from quiz_group_reports.assembler import AttemptTableAssembler

from quiz_group_reports.columns import plan_columns

from quiz_group_reports.interfaces import IActivityGroups
from quiz_group_reports.interfaces import IReportQueryExecutor
from quiz_group_reports.interfaces import ISignificantQuestions
from quiz_group_reports.interfaces import IQuizGroupReportRenderer

from quiz_group_reports.joins import GroupJoinResolver
from quiz_group_reports.joins import current_activity_group

from quiz_group_reports.options import options_from_form
from quiz_group_reports.options import options_from_params

from quiz_group_reports.tables import table_class_for

from quiz_group_reports.utils import download_filename
from quiz_group_reports.utils import activity_has_grades
from quiz_group_reports.utils import grading_method_filter
from quiz_group_reports.utils import grading_method_highlight

logger = __import__('logging').getLogger(__name__)


class ReportRequest(object):
    """
    Everything the report needs to know about the current request. Nothing
    in the report reads request state from anywhere else.
    """

    def __init__(self, user=None, params=None, form_data=None, download=None,
                 requested_group=None, can_access_all_groups=False,
                 can_see_grades=False, base_url=''):
        self.user = user
        self.params = params if params is not None else {}
        self.form_data = form_data
        self.download = download
        self.requested_group = requested_group
        self.can_access_all_groups = can_access_all_groups
        self.can_see_grades = can_see_grades
        self.base_url = base_url


class QuizGroupReport(object):

    mode = 'group'

    report_name = _(u'group')

    def __init__(self, resolver=None, assembler=None):
        self.resolver = resolver if resolver is not None else GroupJoinResolver()
        self.assembler = assembler if assembler is not None else AttemptTableAssembler()
        self.options = {}
        self.result = None

    @Lazy
    def executor(self):
        return component.getUtility(IReportQueryExecutor)

    @Lazy
    def groups(self):
        return component.getUtility(IActivityGroups)

    @Lazy
    def renderer(self):
        return component.getUtility(IQuizGroupReportRenderer)

    @Lazy
    def question_source(self):
        return component.getUtility(ISignificantQuestions)

    def init(self, activity, course_module, course, request):
        """
        Work out the group and the student joins.
        """
        current_group = current_activity_group(course_module, request.user,
                                               request.requested_group,
                                               request.can_access_all_groups,
                                               groups=self.groups)
        self.qmsubselect = grading_method_filter(activity)
        return self.resolver.resolve(course_module, course, current_group)

    def _report_options(self, activity, course_module, course, request, current_group):
        kwargs = dict(activity=activity,
                      course_module=course_module,
                      course=course,
                      group=current_group if current_group > 0 else 0,
                      usercanseegrades=bool(request.can_see_grades
                                            and activity_has_grades(activity)),
                      can_access_all_groups=request.can_access_all_groups,
                      download=request.download,
                      base_url=request.base_url)
        if request.form_data is not None:
            return options_from_form(request.form_data, **kwargs)
        return options_from_params(request.params, **kwargs)

    def _has_students(self, join):
        if join.is_empty or join.cannot_match_any_rows:
            return False
        sql = 'SELECT DISTINCT u.id FROM users u %s WHERE %s' % (join.joins,
                                                                 join.wheres or '1 = 1')
        return self.executor.record_exists(sql, join.params)

    def _your_groups_count(self, activity, course_module, user):
        subselects = []
        params = {'quizid': activity.id}
        for group_id in self.groups.user_group_ids(user, course_module):
            join = self.resolver.group_join(course_module, group_id)
            if join.is_empty or join.cannot_match_any_rows:
                continue
            subselects.append('quiza.userid IN (SELECT u.id FROM users u %s WHERE %s)'
                              % (join.joins, join.wheres or '1 = 1'))
            params.update(join.params)
        if not subselects:
            return 0
        sql = ('SELECT COUNT(1) FROM quiz_attempts quiza '
               'WHERE quiza.quiz = :quizid AND quiza.preview = 0 AND (%s)')
        return self.executor.count(sql % ' OR '.join(subselects), params)

    def attempt_summary(self, activity, course_module, current_group, group_join,
                        user=None, can_access_all_groups=False):
        """
        The "Attempts: N" line. Adds the attempts of the selected group when
        there is one, or of the user's own groups when separate groups keep
        the user to them.
        """
        params = {'quizid': activity.id}
        total = self.executor.count('SELECT COUNT(1) FROM quiz_attempts quiza '
                                    'WHERE quiza.quiz = :quizid AND quiza.preview = 0',
                                    params)
        if current_group > 0 and not group_join.is_empty:
            params.update(group_join.params)
            sql = ('SELECT COUNT(DISTINCT quiza.id) FROM users u '
                   'JOIN quiz_attempts quiza ON quiza.userid = u.id %s '
                   'WHERE quiza.quiz = :quizid AND quiza.preview = 0 AND %s')
            sql = sql % (group_join.joins, group_join.wheres or '1 = 1')
            in_group = self.executor.count(sql, params)
            return _(u'Attempts: ${total} (${group} from this group)',
                     mapping={'total': total, 'group': in_group})
        if      self.groups.activity_group_mode(course_module) == SEPARATEGROUPS \
            and not can_access_all_groups:
            yours = self._your_groups_count(activity, course_module, user)
            return _(u'Attempts: ${total} (${group} from your groups)',
                     mapping={'total': total, 'group': yours})
        return _(u'Attempts: ${total}', mapping={'total': total})

    def display(self, activity, course_module, course, request):
        self.options = options = {}
        joins = self.init(activity, course_module, course, request)
        current_group = joins.current_group

        report_options = self._report_options(activity, course_module, course,
                                              request, current_group)
        options['report_options'] = report_options
        options['form_data'] = report_options.get_initial_form_data()

        questions = list(self.question_source.significant_questions(activity))

        table_class = table_class_for(report_options.whichtries)
        table = table_class(activity, report_options, questions, self.qmsubselect)
        downloading = table.is_downloading

        has_group_students = self._has_students(joins.group_students)
        has_students = self._has_students(joins.students)

        options['activity'] = activity
        options['course'] = course
        options['current_group'] = current_group
        options['notice'] = None
        options['table'] = None
        options['scope'] = None

        if not downloading:
            if self.groups.activity_group_mode(course_module):
                options['groups'] = list(self.groups.get_all_groups(course_module))
            options['attempt_summary'] = self.attempt_summary(activity, course_module,
                                                              current_group,
                                                              joins.group_students,
                                                              request.user,
                                                              request.can_access_all_groups)

        has_questions = bool(questions)
        if not downloading:
            options['notice'] = choose_notice(has_questions, has_students,
                                              current_group, has_group_students)

        has_students = has_students and (not current_group or has_group_students)
        if has_questions and (has_students or report_options.attempts == ALL_WITH):
            plan = plan_columns(report_options, questions,
                                report_options.usercanseegrades)
            options['scope'] = self.assembler.assemble(table, joins.allowed,
                                                       plan.columns, plan.headers,
                                                       report_options)
            options['table'] = table
            if not downloading:
                options['grading_highlight'] = grading_method_highlight(activity,
                                                                        report_options.onlygraded)

        if downloading:
            options['filename'] = download_filename(self.report_name, course, activity)
            logger.info("Downloading %s report for quiz %s as %s",
                        self.mode, activity.id, report_options.download)
            self.result = self.renderer.download(options)
        else:
            self.result = self.renderer.page(options)
        return True
