# Page Objects for the plog browser tests

"""
Page Object Model for the plog single page application.

Each page object wraps the [name="X"] lookups and the loading-flag
synchronization for one route.
"""

from .base_page import PlogBasePage, ElementLookupError, named_selector
from .login_page import LoginPage
from .album_page import AlbumPage
from .registration_page import RegistrationPage
from .profile_page import ProfilePage
from .password_page import PasswordResetPage
from .verify_page import VerifyEmailPage

__all__ = [
    'PlogBasePage',
    'ElementLookupError',
    'named_selector',
    'LoginPage',
    'AlbumPage',
    'RegistrationPage',
    'ProfilePage',
    'PasswordResetPage',
    'VerifyEmailPage'
]
