#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
.. $Id$
"""

logger = __import__('logging').getLogger(__name__)

#: Request parameter naming the export format of a download
DOWNLOAD_PARAM = 'download'

#: Request parameter naming the selected group
GROUP_PARAM = 'group'

#: Present in the POST data when the settings form was submitted
SUBMIT_PARAM = 'submitbutton'
