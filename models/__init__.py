from .db import db
from .user import User, Role, user_roles
from .audit_log import AuditLog
from .session import AuthSession
from .login_attempt import LoginAttempt
from .screen_location import ScreenLocation
from .screen_pricing_option import ScreenPricingOption
from .screen_booking import ScreenBooking
from .invoice import Invoice
