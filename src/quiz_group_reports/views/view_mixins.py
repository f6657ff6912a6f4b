#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
.. $Id$
"""

from pyramid.httpexceptions import HTTPForbidden

from zope import component

from zope.cachedescriptors.property import Lazy

from quiz_group_reports.interfaces import ICourse
from quiz_group_reports.interfaces import ICourseModule
from quiz_group_reports.interfaces import IReportCapabilities

from quiz_group_reports.options import BOOLEAN_OPTIONS

from quiz_group_reports.report import ReportRequest

from quiz_group_reports.utils import parse_int

from quiz_group_reports.views import GROUP_PARAM
from quiz_group_reports.views import SUBMIT_PARAM
from quiz_group_reports.views import DOWNLOAD_PARAM

logger = __import__('logging').getLogger(__name__)


class AbstractQuizReportView(object):
    """
    An abstract report view on a quiz activity. Turns the pyramid request
    into an explicit :class:`ReportRequest`.
    """

    def __init__(self, context, request):
        self.context = context
        self.request = request

    @Lazy
    def remoteUser(self):
        return self.request.authenticated_userid

    @Lazy
    def capabilities(self):
        return component.getUtility(IReportCapabilities)

    @Lazy
    def activity(self):
        return self.context

    @Lazy
    def course_module(self):
        return ICourseModule(self.context)

    @Lazy
    def course(self):
        return ICourse(self.context)

    def _check_access(self):
        if not self.capabilities.can_view_report(self.remoteUser, self.activity):
            raise HTTPForbidden()

    def _form_data(self):
        post = getattr(self.request, 'POST', None)
        if self.request.method == 'POST' and post and SUBMIT_PARAM in post:
            result = dict(post.items())
            # Unchecked checkboxes are not submitted
            for name in BOOLEAN_OPTIONS:
                result.setdefault(name, False)
            return result
        return None

    def _report_request(self):
        params = self.request.params
        return ReportRequest(user=self.remoteUser,
                             params=dict(params.items()),
                             form_data=self._form_data(),
                             download=params.get(DOWNLOAD_PARAM) or None,
                             requested_group=parse_int(params.get(GROUP_PARAM), None),
                             can_access_all_groups=bool(
                                 self.capabilities.can_access_all_groups(self.remoteUser,
                                                                         self.activity)),
                             can_see_grades=bool(
                                 self.capabilities.can_see_grades(self.remoteUser,
                                                                  self.activity)),
                             base_url=self.request.path_url)
