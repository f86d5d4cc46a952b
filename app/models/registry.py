# Imports every model so relationship targets resolve and metadata is complete.
from app.core.database import Base  # noqa: F401
from app.models.user import User  # noqa: F401
from app.models.exam import Exam  # noqa: F401
from app.models.question import Question  # noqa: F401
from app.models.option import Option  # noqa: F401
from app.models.submission import Submission  # noqa: F401
from app.models.answer import Answer  # noqa: F401
from app.models.notification import Notification  # noqa: F401
