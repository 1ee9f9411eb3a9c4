from .user import User
from .evaluation import Evaluation
from .notification import NotificationLog
