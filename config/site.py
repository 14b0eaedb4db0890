# Plog deployment configuration
#
# IMPORTANT: Update these values (or set the environment variables) when
# pointing the suite at a different plog installation or Selenium server

import os

# Application under test
PLOG_BASE_URL = os.environ.get('PLOG_BASE_URL', 'https://plog.org:8004').rstrip('/')
PAGE_TITLE = 'ZM Plog'

# Selenium server; an empty value means use a local browser driver
SELENIUM_REMOTE_URL = os.environ.get('SELENIUM_REMOTE_URL', 'http://localhost:4444/wd/hub')

# mailbot delivers each message to one file per recipient in this directory
MAILBOX_DIR = os.environ.get('PLOG_MAILBOX_DIR', '/tmp/mailbot.boxes')

# Routes (hash fragments of the single page application)
HOME_PATH = '/'
ALBUM_PATH = '/#/album'
PROFILE_PATH = '/#/profile'
REGISTER_PATH = '/#/register'
PASSWORD_PATH = '/#/password'
LOGIN_PATH = '/#/login'
VERIFY_PATH = '/#/verify/{email}/token/{token}'

# DOM contract
LOADING_FLAG_SELECTOR = "div[class='selenium-flag']"
LOGIN_FORM_SELECTOR = 'form[name="loginForm"]'
SESSION_TOKEN_NAME = 'SessionToken'
SESSION_TOKEN_LENGTH = 36
