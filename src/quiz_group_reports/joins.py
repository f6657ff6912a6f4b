#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Resolution of the student populations a report is built from.

Three joins are computed for every request: every eligible student of the
course, the students of the selected group, and the students allowed to
appear in the report (one of the former two).

.. $Id$
"""

from collections import namedtuple

from zope import component
from zope import interface

from quiz_group_reports import NOGROUPS
from quiz_group_reports import VISIBLEGROUPS
from quiz_group_reports import SEPARATEGROUPS
from quiz_group_reports import NO_GROUPS_ALLOWED
from quiz_group_reports import STUDENT_CAPABILITIES

from quiz_group_reports.interfaces import IStudentJoin
from quiz_group_reports.interfaces import IActivityGroups
from quiz_group_reports.interfaces import IEnrolledUsersJoinBuilder

logger = __import__('logging').getLogger(__name__)


@interface.implementer(IStudentJoin)
class StudentJoin(object):
    """
    A SQL fragment restricting the user table (aliased ``u``). The default,
    empty join restricts nothing.
    """

    def __init__(self, joins='', wheres='', params=None, cannot_match_any_rows=False):
        self.joins = joins
        self.wheres = wheres
        self.params = dict(params or {})
        self.cannot_match_any_rows = cannot_match_any_rows

    def _key(self):
        return (self.joins, self.wheres, self.params, self.cannot_match_any_rows)

    def __eq__(self, other):
        try:
            return self._key() == other._key()
        except AttributeError:
            return NotImplemented

    def __ne__(self, other):
        result = self.__eq__(other)
        return result if result is NotImplemented else not result

    __hash__ = None

    @property
    def is_empty(self):
        return not self.joins and not self.wheres

    def __repr__(self):
        return '<%s joins=%r wheres=%r>' % (self.__class__.__name__,
                                           self.joins, self.wheres)


StudentJoins = namedtuple('StudentJoins',
                          ('current_group', 'students', 'group_students', 'allowed'))


def current_activity_group(course_module, user, requested_group=None,
                           can_access_all_groups=False, groups=None):
    """
    Work out which group the report is for.

    Returns ``0`` for "all participants", a group id, or
    :data:`NO_GROUPS_ALLOWED` when the user is restricted to their own
    groups and has none.
    """
    groups = component.getUtility(IActivityGroups) if groups is None else groups
    mode = groups.activity_group_mode(course_module)
    if not mode or mode == NOGROUPS:
        return 0

    sees_all = can_access_all_groups or mode == VISIBLEGROUPS
    if sees_all:
        allowed = [g.id for g in groups.get_all_groups(course_module)]
    else:
        allowed = list(groups.user_group_ids(user, course_module))

    requested = requested_group or 0
    if requested and requested in allowed:
        return requested
    if sees_all:
        if requested:
            logger.debug("Group %s not available in %s; showing all participants",
                         requested, course_module)
        return 0
    if allowed:
        return allowed[0]
    if mode == SEPARATEGROUPS:
        return NO_GROUPS_ALLOWED
    return 0


class GroupJoinResolver(object):
    """
    Computes the :class:`StudentJoins` for one request.
    """

    capabilities = STUDENT_CAPABILITIES

    def __init__(self, builder=None, groups=None):
        self.builder = builder
        self.groups = groups

    def _builder(self):
        if self.builder is None:
            return component.getUtility(IEnrolledUsersJoinBuilder)
        return self.builder

    def _groups(self):
        if self.groups is None:
            return component.getUtility(IActivityGroups)
        return self.groups

    def group_join(self, context, group_id=0):
        """
        The eligible students of the course, or of one group when
        ``group_id`` is not zero.
        """
        return self._builder().enrolled_with_capabilities_join(context,
                                                               capabilities=self.capabilities,
                                                               group_id=group_id)

    def resolve(self, context, unused_course, selected_group):
        if selected_group == NO_GROUPS_ALLOWED:
            empty = StudentJoin()
            return StudentJoins(selected_group, empty, empty, empty)

        students = self.group_join(context)
        if not selected_group:
            return StudentJoins(0, students, StudentJoin(), students)

        if not self._groups().group_exists(selected_group):
            logger.debug("Group %s does not exist; showing all participants",
                         selected_group)
            return StudentJoins(0, students, StudentJoin(), students)

        group_students = self.group_join(context, selected_group)
        return StudentJoins(selected_group, students, group_students, group_students)


def get_students_joins(context, course, selected_group):
    return GroupJoinResolver().resolve(context, course, selected_group)
