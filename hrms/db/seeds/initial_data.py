import logging
from datetime import date
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from hrms.core.security import get_password_hash
from hrms.models.auth.user import User
from hrms.models.shared.enums import EmploymentType, Gender, Role

logger = logging.getLogger(__name__)

CAMPUS_ADDRESS = {
    "street": "NIT Raipur Campus",
    "city": "Raipur",
    "state": "Chhattisgarh",
    "pincode": "492010",
}

# Bootstrap accounts; every password should be changed after first login
INITIAL_USERS = [
    {
        "employee_id": "NITR-ADM-001",
        "username": "admin",
        "email": "admin@nitrrfie.com",
        "password": "admin123",
        "role": Role.ADMIN,
        "first_name": "System",
        "last_name": "Administrator",
        "designation": "Administrator",
    },
    {
        "employee_id": "NITR-CEO-001",
        "username": "medha",
        "email": "ceo@nitrrfie.com",
        "password": "medha",
        "role": Role.CEO,
        "first_name": "Medha",
        "last_name": "Singh",
        "gender": Gender.FEMALE,
        "designation": "Chief Executive Officer",
        "joining_date": date(2025, 7, 15),
        "base_salary": 80000,
        "gross_remuneration": 80000,
        "casual_leave": 12,
        "on_duty_leave": 0,
    },
    {
        "employee_id": "NITR-MGR-001",
        "username": "sunil",
        "email": "manager@nitrrfie.com",
        "password": "sunil",
        "role": Role.INCUBATION_MANAGER,
        "first_name": "Sunil",
        "last_name": "Dewangan",
        "gender": Gender.MALE,
        "designation": "Incubation Manager",
        "joining_date": date(2025, 9, 10),
        "base_salary": 54000,
        "gross_remuneration": 54000,
        "casual_leave": 8,
        "on_duty_leave": 0,
    },
    {
        "employee_id": "NITR-ACC-001",
        "username": "ashok",
        "email": "accountant@nitrrfie.com",
        "password": "ashok",
        "role": Role.ACCOUNTANT,
        "first_name": "Ashok",
        "last_name": "Kumar Sahu",
        "gender": Gender.MALE,
        "designation": "Accountant Cum Administrator",
        "joining_date": date(2025, 9, 30),
        "base_salary": 32400,
        "gross_remuneration": 32400,
        "casual_leave": 8,
        "on_duty_leave": 0,
    },
]

async def create_initial_data(session: AsyncSession):
    """Create the bootstrap accounts, skipping any that already exist"""
    try:
        logger.info("📋 Creating initial data...")
        created = 0
        for data in INITIAL_USERS:
            result = await session.execute(select(User).where(User.username == data["username"]))
            if result.scalar_one_or_none():
                continue

            fields = {k: v for k, v in data.items() if k != "password"}
            session.add(User(
                hashed_password=get_password_hash(data["password"]),
                address=CAMPUS_ADDRESS,
                employment_type=EmploymentType.FULL_TIME,
                is_active=True,
                **fields,
            ))
            created += 1
            logger.info(f"Created user: {data['username']} ({data['role'].value})")

        await session.commit()
        logger.info(f"✅ Initial data created successfully ({created} new users)")
        return created

    except Exception as e:
        logger.error(f"❌ Error creating initial data: {str(e)}")
        await session.rollback()
        raise
