from hrms.models.auth.user import User
from hrms.models.hr.attendance import Attendance
from hrms.models.hr.leave import Leave
from hrms.models.hr.holiday import Holiday
from hrms.models.hr.peer_rating import PeerRating
