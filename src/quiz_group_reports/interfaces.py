#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
.. $Id$
"""

from zope import interface

from zope.interface import Attribute

from nti.schema.field import Int
from nti.schema.field import Bool
from nti.schema.field import Choice

from quiz_group_reports import LAST_TRY
from quiz_group_reports import WHICH_TRIES
from quiz_group_reports import ENROLLED_WITH
from quiz_group_reports import ATTEMPTS_MODES
from quiz_group_reports import DEFAULT_PAGE_SIZE


class ICourse(interface.Interface):
    """
    The course an activity lives in.
    """
    id = Attribute(u"The course id")
    shortname = Attribute(u"The course short name, used in download file names")


class ICourseModule(interface.Interface):
    """
    The placement of an activity within a course; the context capabilities
    and groups are evaluated against.
    """
    id = Attribute(u"The course module id")


class IQuizActivity(interface.Interface):
    """
    The graded quiz being reported on.
    """
    id = Attribute(u"The quiz id")
    name = Attribute(u"The quiz name")
    grade = Attribute(u"The maximum grade for the quiz")
    sumgrades = Attribute(u"The sum of the question marks")
    grademethod = Attribute(u"How the final grade is picked among attempts")
    attempts = Attribute(u"Number of attempts allowed, 0 for unlimited")
    decimalpoints = Attribute(u"Decimal places used when showing grades")
    has_feedback = Attribute(u"Whether the quiz has overall feedback")

    def feedback_for_grade(grade):
        """
        Return the overall feedback text for the given (rescaled) grade.
        """


class IQuestion(interface.Interface):
    """
    A question as shown in the report.
    """
    id = Attribute(u"The question identifier within the quiz (its slot)")
    number = Attribute(u"The ordinal number displayed to users")
    text = Attribute(u"The question display text")


class IResponseTry(interface.Interface):
    """
    One try at one question of an attempt.
    """
    question_summary = Attribute(u"The question as it was shown")
    response_summary = Attribute(u"The response given")
    right_answer = Attribute(u"The right answer")


class IStudentJoin(interface.Interface):
    """
    A SQL filter fragment restricting a query over the user table, aliased
    ``u``, to a set of users.

    An empty join (no ``joins``) places no restriction on the surrounding
    query; it does *not* denote the empty set.
    """
    joins = Attribute(u"The SQL join clauses")
    wheres = Attribute(u"The SQL condition")
    params = Attribute(u"The named parameters used by joins and wheres")
    cannot_match_any_rows = Attribute(u"True if the join deliberately selects nobody")


class IEnrolledUsersJoinBuilder(interface.Interface):
    """
    Builds joins for users enrolled in a course with some capabilities.
    """

    def enrolled_with_capabilities_join(context, capabilities=(), group_id=0):
        """
        Return an :class:`IStudentJoin` for users enrolled in the course of
        ``context`` holding any of ``capabilities``, restricted to members of
        ``group_id`` when that is not zero.
        """


class IActivityGroups(interface.Interface):
    """
    Group membership and metadata lookup.
    """

    def activity_group_mode(course_module):
        """
        Return the group mode of the activity.
        """

    def get_all_groups(course_module):
        """
        Return the groups available to the activity, ordered by name.
        """

    def group_exists(group_id):
        """
        Return whether a group with the given id exists.
        """

    def user_group_ids(user, course_module):
        """
        Return the ids of the groups of the activity the user belongs to.
        """


class ISignificantQuestions(interface.Interface):
    """
    Supplies the questions of a quiz that appear in reports.
    """

    def significant_questions(activity):
        """
        Return the :class:`IQuestion` objects of ``activity`` in display order.
        """


class IResponseSummaries(interface.Interface):
    """
    Supplies the tries made at each question of an attempt.
    """

    def tries(usage_id, question_id):
        """
        Return the :class:`IResponseTry` sequence for one question of one
        attempt, oldest first. Empty if the question was never tried.
        """


class IReportQueryExecutor(interface.Interface):
    """
    Read-only execution of report queries. Failures propagate to callers.
    """

    def record_exists(sql, params):
        """
        Return whether the query returns at least one row.
        """

    def count(sql, params):
        """
        Return the single integer selected by a count query.
        """


class IReportCapabilities(interface.Interface):
    """
    Capability checks for the requesting user.
    """

    def can_view_report(user, activity):
        """
        May the user see the report at all?
        """

    def can_access_all_groups(user, activity):
        """
        May the user see every group regardless of group mode?
        """

    def can_see_grades(user, activity):
        """
        May the user see attempt grades?
        """


class IQuizGroupReportRenderer(interface.Interface):
    """
    Renders the assembled report.
    """

    def page(options):
        """
        Produce the interactive page for the report ``options`` mapping.
        """

    def download(options):
        """
        Produce a downloadable file for the report ``options`` mapping.
        """


class IQuizGroupReportDefaults(interface.Interface):
    """
    The default report settings. Registered as a utility; hosts may
    register their own to change them.
    """

    attempts = Choice(title=u"Which attempts to include",
                      values=ATTEMPTS_MODES,
                      default=ENROLLED_WITH,
                      required=True)

    whichtries = Choice(title=u"Which tries to show",
                        values=WHICH_TRIES,
                        default=LAST_TRY,
                        required=True)

    showqtext = Bool(title=u"Show the question text",
                     default=False,
                     required=False)

    showresponses = Bool(title=u"Show the responses",
                         default=True,
                         required=False)

    showright = Bool(title=u"Show the right answers",
                     default=False,
                     required=False)

    onlygraded = Bool(title=u"Only show the graded attempt of each user",
                      default=False,
                      required=False)

    pagesize = Int(title=u"Rows per page",
                   min=1,
                   default=DEFAULT_PAGE_SIZE,
                   required=True)


class IQuizGroupReportOptions(IQuizGroupReportDefaults):
    """
    The settings in effect for one request of the report.
    """
