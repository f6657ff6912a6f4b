#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Settings that control the group report.

Settings arrive either from the submitted settings form or from the query
string of a pagination/sorting link; both paths produce a fully populated
:class:`QuizGroupReportOptions` using the same defaults.

.. $Id$
"""

from pyramid.encode import urlencode

from zope import component
from zope import interface

from nti.schema.eqhash import EqHash

from nti.schema.fieldproperty import createDirectFieldProperties

from nti.schema.schema import SchemaConfigured

from quiz_group_reports import ALL_WITH
from quiz_group_reports import WHICH_TRIES
from quiz_group_reports import ENROLLED_WITH
from quiz_group_reports import ATTEMPTS_MODES
from quiz_group_reports import ENROLLED_WITHOUT

from quiz_group_reports.interfaces import IQuizGroupReportOptions
from quiz_group_reports.interfaces import IQuizGroupReportDefaults

from quiz_group_reports.utils import parse_bool
from quiz_group_reports.utils import parse_positive_int
from quiz_group_reports.utils import can_filter_only_graded

logger = __import__('logging').getLogger(__name__)

#: option name -> query string name
URL_PARAM_NAMES = (
    ('attempts', 'attempts'),
    ('whichtries', 'whichtries'),
    ('showqtext', 'qtext'),
    ('showresponses', 'resp'),
    ('showright', 'right'),
    ('onlygraded', 'onlygraded'),
    ('pagesize', 'pagesize'),
)

BOOLEAN_OPTIONS = ('showqtext', 'showresponses', 'showright', 'onlygraded')

SHOW_FLAGS = ('showqtext', 'showresponses', 'showright')


@interface.implementer(IQuizGroupReportDefaults)
class QuizGroupReportDefaults(SchemaConfigured):
    """
    The shipped defaults; the field defaults of the schema.
    """
    createDirectFieldProperties(IQuizGroupReportDefaults)


def get_report_defaults():
    defaults = component.queryUtility(IQuizGroupReportDefaults)
    if defaults is None:
        defaults = QuizGroupReportDefaults()
    return defaults


@EqHash('attempts', 'whichtries', 'showqtext', 'showresponses', 'showright',
        'onlygraded', 'pagesize', 'group', 'usercanseegrades')
@interface.implementer(IQuizGroupReportOptions)
class QuizGroupReportOptions(SchemaConfigured):
    """
    The settings in effect for one request, together with the request facts
    they depend on (group, capabilities, download format and base url).
    """
    createDirectFieldProperties(IQuizGroupReportDefaults)

    mode = 'group'

    def __init__(self, activity=None, course_module=None, course=None,
                 group=0, usercanseegrades=False, can_access_all_groups=False,
                 download=None, base_url='', **kwargs):
        self.activity = activity
        self.course_module = course_module
        self.course = course
        self.group = group
        self.usercanseegrades = usercanseegrades
        self.can_access_all_groups = can_access_all_groups
        self.download = download
        self.base_url = base_url
        super(QuizGroupReportOptions, self).__init__()
        self._apply_defaults()
        for name, value in kwargs.items():
            setattr(self, name, value)

    def _apply_defaults(self):
        defaults = get_report_defaults()
        for name, unused_url_name in URL_PARAM_NAMES:
            setattr(self, name, getattr(defaults, name))

    def _set_attempts(self, value):
        if value not in ATTEMPTS_MODES:
            logger.debug("Unknown attempts mode %r; using default", value)
            value = get_report_defaults().attempts
        self.attempts = value

    def _set_whichtries(self, value):
        if value not in WHICH_TRIES:
            logger.debug("Unknown tries mode %r; using default", value)
            value = get_report_defaults().whichtries
        self.whichtries = value

    def _set_values(self, values):
        """
        Apply the recognised entries of ``values``; absent entries keep the
        defaults.
        """
        defaults = get_report_defaults()
        if values.get('attempts') is not None:
            self._set_attempts(values['attempts'])
        if values.get('whichtries') is not None:
            self._set_whichtries(values['whichtries'])
        for name in BOOLEAN_OPTIONS:
            if name in values:
                setattr(self, name, parse_bool(values[name], getattr(defaults, name)))
        if 'pagesize' in values:
            self.pagesize = parse_positive_int(values['pagesize'], defaults.pagesize)

    def process_settings_from_form(self, fromform):
        self._apply_defaults()
        self._set_values(fromform)
        self.resolve_dependencies()

    def process_settings_from_params(self, params):
        self._apply_defaults()
        values = {}
        for name, url_name in URL_PARAM_NAMES:
            if url_name in params:
                values[name] = params[url_name]
            elif name in params:
                values[name] = params[name]
        self._set_values(values)
        self.resolve_dependencies()

    def resolve_dependencies(self):
        if self.attempts == ALL_WITH and not self.can_access_all_groups:
            logger.debug("User cannot access all groups; showing enrolled users only")
            self.attempts = ENROLLED_WITH

        if self.onlygraded:
            if      self.attempts == ENROLLED_WITHOUT \
                or (self.activity is not None and not can_filter_only_graded(self.activity)):
                self.onlygraded = False

        if not any(getattr(self, name) for name in SHOW_FLAGS):
            self.showresponses = True

    def get_url_params(self):
        result = []
        for name, url_name in URL_PARAM_NAMES:
            value = getattr(self, name)
            if isinstance(value, bool):
                value = int(value)
            result.append((url_name, value))
        if self.group:
            result.append(('group', self.group))
        return result

    def get_url(self):
        query = urlencode(self.get_url_params())
        base_url = self.base_url or ''
        separator = '&' if '?' in base_url else '?'
        return base_url + separator + query

    def get_initial_form_data(self):
        result = {}
        for name, unused_url_name in URL_PARAM_NAMES:
            result[name] = getattr(self, name)
        return result

    @property
    def is_downloading(self):
        return bool(self.download)


def options_from_form(fromform, **kwargs):
    options = QuizGroupReportOptions(**kwargs)
    options.process_settings_from_form(fromform)
    return options


def options_from_params(params, **kwargs):
    options = QuizGroupReportOptions(**kwargs)
    options.process_settings_from_params(params)
    return options
