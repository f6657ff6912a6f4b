#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
.. $Id$
"""

from pyramid.view import view_config

from quiz_group_reports import VIEW_QUIZ_GROUP_REPORT

from quiz_group_reports.interfaces import IQuizActivity

from quiz_group_reports.report import QuizGroupReport

from quiz_group_reports.views.view_mixins import AbstractQuizReportView

logger = __import__('logging').getLogger(__name__)


@view_config(context=IQuizActivity,
             request_method='GET',
             name=VIEW_QUIZ_GROUP_REPORT)
@view_config(context=IQuizActivity,
             request_method='POST',
             name=VIEW_QUIZ_GROUP_REPORT)
class QuizGroupReportView(AbstractQuizReportView):
    """
    The group report of a quiz, as a page or as a download.
    """

    report_factory = QuizGroupReport

    def __call__(self):
        self._check_access()
        report = self.report_factory()
        report.display(self.activity, self.course_module, self.course,
                       self._report_request())
        return report.result
