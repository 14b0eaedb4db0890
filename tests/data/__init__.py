# Test Data Configuration

"""
Centralized test data for the plog workflows.
"""

from .records import (
    Credentials, Registration, ProfileUpdate, ProfileExpectation,
    LoginCase, EmailVerificationCase, AccountState
)
from .test_accounts import TEST_ACCOUNTS, USER_ONE, USER_TWO, PROFILE_USER, get_test_account
from .test_scenarios import LOGIN_CASES, BAD_VERIFICATION_CASES, PAGES_NEEDING_LOGIN

__all__ = [
    'Credentials',
    'Registration',
    'ProfileUpdate',
    'ProfileExpectation',
    'LoginCase',
    'EmailVerificationCase',
    'AccountState',
    'TEST_ACCOUNTS',
    'USER_ONE',
    'USER_TWO',
    'PROFILE_USER',
    'get_test_account',
    'LOGIN_CASES',
    'BAD_VERIFICATION_CASES',
    'PAGES_NEEDING_LOGIN'
]
