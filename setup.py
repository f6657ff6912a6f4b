from setuptools import setup, find_packages
import codecs

VERSION = '0.0.0'


TESTS_REQUIRE = [
    'fudge',
    'nti.testing',
    'PyHamcrest',
    'zope.i18n',
    'zope.testrunner',
]

setup(
    name='quiz_group_reports',
    version=VERSION,
    author='NextThought',
    description="Group attendance and response reports for quizzes",
    long_description=codecs.open('README.rst', encoding='utf-8').read(),
    license='Proprietary',
    keywords='pyramid quiz groups reporting',
    classifiers=[
        'Framework :: Pyramid',
        'Intended Audience :: Developers',
        'Natural Language :: English',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: Implementation :: CPython'
    ],
    packages=find_packages('src'),
    package_dir={'': 'src'},
    include_package_data=True,
    package_data={
        '': ['*.zcml'],
    },
    zip_safe=False,
    install_requires=[
        'setuptools',
        'nti.schema',
        'pyramid',
        'zope.cachedescriptors',
        'zope.component',
        'zope.configuration',
        'zope.i18nmessageid',
        'zope.interface',
    ],
    extras_require={
        'test': TESTS_REQUIRE,
    },
)
