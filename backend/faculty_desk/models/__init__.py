from faculty_desk.models.account import Account, AccountRole, Department  # noqa: F401
from faculty_desk.models.activity_log import ActivityLog  # noqa: F401
from faculty_desk.models.auth_session import AuthSession  # noqa: F401
from faculty_desk.models.leave_application import LeaveApplication, LeaveStatus  # noqa: F401
from faculty_desk.models.schedule import ScheduleEntry, Weekday  # noqa: F401
