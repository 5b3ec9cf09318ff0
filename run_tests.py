#!/usr/bin/env python
"""
Test runner with coverage measurement
Usage: python run_tests.py [app labels...]
Settings for the measurement live under [tool.coverage] in pyproject.toml
"""
import os
import sys
import coverage
import django
from django.conf import settings
from django.test.utils import get_runner

APPS = [
    'erp.core',
    'erp.locations',
    'erp.catalog',
    'erp.parties',
    'erp.inventory',
    'erp.production',
    'erp.purchasing',
    'erp.sales',
    'erp.pricing',
    'erp.helpdesk',
    'erp.hr',
    'erp.projects',
]

if __name__ == "__main__":
    cov = coverage.Coverage(config_file='pyproject.toml')
    cov.start()

    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'erp.config.settings')
    django.setup()
    TestRunner = get_runner(settings)
    test_runner = TestRunner()
    failures = test_runner.run_tests(sys.argv[1:] or APPS)

    cov.stop()
    cov.save()
    cov.report()
    sys.exit(bool(failures))
