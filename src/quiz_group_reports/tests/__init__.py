#!/usr/bin/env python
# -*- coding: utf-8 -*-

# pylint: disable=protected-access,too-many-public-methods

import sqlite3

from collections import namedtuple

from zope import interface

from zope.component import getGlobalSiteManager

from quiz_group_reports import NOGROUPS
from quiz_group_reports import GRADEHIGHEST

from quiz_group_reports.interfaces import ICourse
from quiz_group_reports.interfaces import IQuestion
from quiz_group_reports.interfaces import IQuizActivity
from quiz_group_reports.interfaces import ICourseModule
from quiz_group_reports.interfaces import IResponseTry
from quiz_group_reports.interfaces import IActivityGroups
from quiz_group_reports.interfaces import IResponseSummaries
from quiz_group_reports.interfaces import IReportCapabilities
from quiz_group_reports.interfaces import IReportQueryExecutor
from quiz_group_reports.interfaces import ISignificantQuestions
from quiz_group_reports.interfaces import IQuizGroupReportRenderer
from quiz_group_reports.interfaces import IEnrolledUsersJoinBuilder

from quiz_group_reports.joins import StudentJoin

from nti.testing.base import AbstractTestBase

COURSE_ID = 1
QUIZ_ID = 10

GROUP_A = 100
GROUP_B = 200
GROUP_EMPTY = 300

SCHEMA = """
CREATE TABLE users (id INTEGER PRIMARY KEY, firstname TEXT, lastname TEXT,
                    deleted INTEGER NOT NULL DEFAULT 0);
CREATE TABLE enrolments (userid INTEGER, courseid INTEGER);
CREATE TABLE capabilities (userid INTEGER, courseid INTEGER, capability TEXT);
CREATE TABLE group_members (groupid INTEGER, userid INTEGER);
CREATE TABLE quiz_attempts (id INTEGER PRIMARY KEY, quiz INTEGER, userid INTEGER,
                            attempt INTEGER, uniqueid INTEGER, state TEXT,
                            sumgrades REAL, timestart INTEGER, timefinish INTEGER,
                            preview INTEGER NOT NULL DEFAULT 0);
"""

#: Ann and Bob are in group A, Cid and Dee in group B. Dee is enrolled but
#: holds none of the student capabilities. Eve has left the course but the
#: attempt remains.
USERS = (
    (1, u'Ann', u'Able'),
    (2, u'Bob', u'Baker'),
    (3, u'Cid', u'Cole'),
    (4, u'Dee', u'Dunn'),
    (5, u'Eve', u'Ernst'),
)

ENROLMENTS = ((1, COURSE_ID), (2, COURSE_ID), (3, COURSE_ID), (4, COURSE_ID))

CAPABILITIES = (
    (1, COURSE_ID, 'quiz.attempt'),
    (1, COURSE_ID, 'quiz.review_own_attempts'),
    (2, COURSE_ID, 'quiz.attempt'),
    (3, COURSE_ID, 'quiz.review_own_attempts'),
)

GROUP_MEMBERS = ((GROUP_A, 1), (GROUP_A, 2), (GROUP_B, 3), (GROUP_B, 4))

#: id, quiz, userid, attempt, usage, state, sumgrades, timestart, timefinish, preview
ATTEMPTS = (
    (1, QUIZ_ID, 1, 1, 1001, 'finished', 8.0, 100, 200, 0),
    (2, QUIZ_ID, 1, 2, 1002, 'finished', 6.0, 300, 400, 0),
    (3, QUIZ_ID, 2, 1, 1003, 'finished', None, 100, 250, 0),
    (4, QUIZ_ID, 4, 1, 1004, 'finished', 10.0, 100, 150, 1),
    (5, QUIZ_ID, 5, 1, 1005, 'finished', 5.0, 100, 300, 0),
)


def create_database():
    connection = sqlite3.connect(':memory:')
    connection.row_factory = sqlite3.Row
    connection.executescript(SCHEMA)
    connection.executemany('INSERT INTO users (id, firstname, lastname) VALUES (?, ?, ?)',
                           USERS)
    connection.executemany('INSERT INTO enrolments VALUES (?, ?)', ENROLMENTS)
    connection.executemany('INSERT INTO capabilities VALUES (?, ?, ?)', CAPABILITIES)
    connection.executemany('INSERT INTO group_members VALUES (?, ?)', GROUP_MEMBERS)
    connection.executemany('INSERT INTO quiz_attempts VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)',
                           ATTEMPTS)
    return connection


@interface.implementer(ICourse)
class Course(object):

    def __init__(self, id=COURSE_ID, shortname=u'ENG101'):
        self.id = id
        self.shortname = shortname


@interface.implementer(ICourseModule)
class CourseModule(object):

    def __init__(self, id=5, course_id=COURSE_ID):
        self.id = id
        self.course_id = course_id


@interface.implementer(IQuizActivity)
class Quiz(object):

    def __init__(self, id=QUIZ_ID, name=u'Weekly quiz', grade=10.0, sumgrades=10.0,
                 grademethod=GRADEHIGHEST, attempts=0, decimalpoints=2,
                 has_feedback=True):
        self.id = id
        self.name = name
        self.grade = grade
        self.sumgrades = sumgrades
        self.grademethod = grademethod
        self.attempts = attempts
        self.decimalpoints = decimalpoints
        self.has_feedback = has_feedback
        self.course_module = CourseModule()
        self.course = Course()

    def feedback_for_grade(self, grade):
        return u'Well done' if grade >= 7 else u'Keep trying'


@interface.implementer(IQuestion)
class Question(object):

    def __init__(self, id, number, text=u''):
        self.id = id
        self.number = number
        self.text = text


ResponseTry = namedtuple('ResponseTry',
                         ('question_summary', 'response_summary', 'right_answer'))
interface.classImplements(ResponseTry, IResponseTry)

Group = namedtuple('Group', ('id', 'name'))


@interface.implementer(IEnrolledUsersJoinBuilder)
class SQLiteJoinBuilder(object):
    """
    Enrolled users of the course holding any of the capabilities.
    """

    def __init__(self):
        self.calls = []

    def enrolled_with_capabilities_join(self, context, capabilities=(), group_id=0):
        self.calls.append((capabilities, group_id))
        prefix = 'ej_g%s' % group_id if group_id else 'ej_all'
        params = {prefix + '_courseid': context.course_id}
        joins = ('JOIN enrolments %(p)s ON %(p)s.userid = u.id '
                 'AND %(p)s.courseid = :%(p)s_courseid') % {'p': prefix}
        wheres = 'u.deleted = 0'
        if capabilities:
            names = []
            for index, capability in enumerate(capabilities):
                name = '%s_cap%d' % (prefix, index)
                params[name] = capability
                names.append(':' + name)
            wheres += (' AND EXISTS (SELECT 1 FROM capabilities %(p)sc '
                       'WHERE %(p)sc.userid = u.id AND %(p)sc.courseid = :%(p)s_courseid '
                       'AND %(p)sc.capability IN (%(names)s))') % {'p': prefix,
                                                                  'names': ', '.join(names)}
        if group_id:
            joins += (' JOIN group_members %(p)sg ON %(p)sg.userid = u.id '
                      'AND %(p)sg.groupid = :%(p)s_groupid') % {'p': prefix}
            params[prefix + '_groupid'] = group_id
        return StudentJoin(joins, wheres, params)


@interface.implementer(IReportQueryExecutor)
class SQLiteExecutor(object):

    def __init__(self, connection):
        self.connection = connection

    def record_exists(self, sql, params):
        return self.connection.execute(sql, params).fetchone() is not None

    def count(self, sql, params):
        return self.connection.execute(sql, params).fetchone()[0]

    def fetch(self, sql, params):
        return [dict(row) for row in self.connection.execute(sql, params).fetchall()]


@interface.implementer(IActivityGroups)
class FakeGroups(object):

    def __init__(self, mode=NOGROUPS, groups=(), members=None):
        self.mode = mode
        self.groups = list(groups)
        self.members = members or {}
        self.lookups = []

    def activity_group_mode(self, unused_course_module):
        return self.mode

    def get_all_groups(self, unused_course_module):
        self.lookups.append('all')
        return list(self.groups)

    def group_exists(self, group_id):
        self.lookups.append(group_id)
        return any(g.id == group_id for g in self.groups)

    def user_group_ids(self, user, unused_course_module):
        return list(self.members.get(user, ()))


@interface.implementer(ISignificantQuestions)
class FakeQuestions(object):

    def __init__(self, questions=()):
        self.questions = list(questions)

    def significant_questions(self, unused_activity):
        return list(self.questions)


@interface.implementer(IResponseSummaries)
class FakeSummaries(object):

    def __init__(self, tries=None):
        self.data = tries or {}

    def tries(self, usage_id, question_id):
        return list(self.data.get((usage_id, question_id), ()))


@interface.implementer(IReportCapabilities)
class FakeCapabilities(object):

    def __init__(self, view=True, all_groups=True, grades=True):
        self.view = view
        self.all_groups = all_groups
        self.grades = grades

    def can_view_report(self, unused_user, unused_activity):
        return self.view

    def can_access_all_groups(self, unused_user, unused_activity):
        return self.all_groups

    def can_see_grades(self, unused_user, unused_activity):
        return self.grades


@interface.implementer(IQuizGroupReportRenderer)
class FakeRenderer(object):

    def __init__(self):
        self.calls = []

    def page(self, options):
        self.calls.append(('page', options))
        return ('page', options)

    def download(self, options):
        self.calls.append(('download', options))
        return ('download', options)


QUESTIONS = (Question(1, 1, u'What is 2 + 2?'),
             Question(2, 2, u'Name a prime number.'))

TRIES = {
    (1001, 1): [ResponseTry(u'2 + 2', u'5', u'4'), ResponseTry(u'2 + 2', u'4', u'4')],
    (1001, 2): [ResponseTry(u'Prime', u'7', u'2, 3, 5, 7')],
    (1002, 1): [ResponseTry(u'2 + 2', u'4', u'4')],
    (1002, 2): [ResponseTry(u'Prime', u'9', u'2, 3, 5, 7')],
    (1003, 1): [ResponseTry(u'2 + 2', u'22', u'4')],
}


class QuizGroupReportTestCase(AbstractTestBase):
    """
    Registers the sqlite backed collaborators of the report; the component
    registry is cleaned up after each test.
    """

    group_mode = NOGROUPS

    def setUp(self):
        super(QuizGroupReportTestCase, self).setUp()
        self.connection = create_database()
        self.executor = SQLiteExecutor(self.connection)
        self.builder = SQLiteJoinBuilder()
        self.groups = FakeGroups(mode=self.group_mode,
                                 groups=(Group(GROUP_A, u'Group A'),
                                         Group(GROUP_B, u'Group B'),
                                         Group(GROUP_EMPTY, u'Group C')),
                                 members={'bob': (GROUP_A,), 'dee': (GROUP_B,)})
        self.question_source = FakeQuestions(QUESTIONS)
        self.summaries = FakeSummaries(TRIES)
        self.capabilities = FakeCapabilities()
        self.renderer = FakeRenderer()

        sm = getGlobalSiteManager()
        sm.registerUtility(self.executor, IReportQueryExecutor)
        sm.registerUtility(self.builder, IEnrolledUsersJoinBuilder)
        sm.registerUtility(self.groups, IActivityGroups)
        sm.registerUtility(self.question_source, ISignificantQuestions)
        sm.registerUtility(self.summaries, IResponseSummaries)
        sm.registerUtility(self.capabilities, IReportCapabilities)
        sm.registerUtility(self.renderer, IQuizGroupReportRenderer)

    def tearDown(self):
        self.connection.close()
        super(QuizGroupReportTestCase, self).tearDown()
