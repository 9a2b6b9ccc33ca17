"""Table schema, column definitions and enumerated field values."""

ROLE_EMPLOYER = 'employer'
ROLE_JOB_SEEKER = 'job_seeker'
ROLES = [ROLE_EMPLOYER, ROLE_JOB_SEEKER]

JOB_STATUS_ACTIVE = 'active'
JOB_STATUS_CLOSED = 'closed'
JOB_STATUSES = [JOB_STATUS_ACTIVE, JOB_STATUS_CLOSED]

APPLICATION_STATUS_PENDING = 'pending'
APPLICATION_STATUSES = ['pending', 'reviewed', 'accepted', 'rejected']

JOB_TYPES = ['Full-time', 'Part-time', 'Contract', 'Internship']
DEFAULT_JOB_TYPE = 'Full-time'

LOCATIONS = [
    'Whitefield', 'Koramangala', 'HSR Layout', 'Indiranagar', 'Electronic City',
    'Marathahalli', 'JP Nagar', 'BTM Layout', 'Jayanagar', 'MG Road', 'Hebbal',
    'Yelahanka', 'Bannerghatta Road', 'Sarjapur Road', 'Outer Ring Road', 'Other Bangalore'
]

CATEGORIES = [
    'Software Development', 'Data Science', 'Product Management', 'Design', 'Marketing',
    'Sales', 'HR', 'Finance', 'Operations', 'Customer Support', 'Other'
]

# Column order matters: it is the insert order used by local_storage.
USER_COLUMNS = [
    'id', 'name', 'email', 'password_hash', 'role', 'company', 'location', 'phone',
    'resume', 'skills', 'experience', 'created_date'
]

JOB_COLUMNS = [
    'id', 'title', 'company', 'description', 'location', 'category', 'job_type',
    'salary_min', 'salary_max', 'experience_required', 'skills', 'employer_id',
    'status', 'posted_date'
]

APPLICATION_COLUMNS = [
    'id', 'job_id', 'applicant_id', 'status', 'cover_letter', 'resume',
    'applied_date', 'updated_date'
]

# Columns holding JSON-encoded lists
JSON_COLUMNS = {'skills'}

# Unique indexes backing the email and (job, applicant) constraints
USERS_EMAIL_INDEX = 'idx_users_email'
APPLICATIONS_JOB_APPLICANT_INDEX = 'idx_applications_job_applicant'

# Range of SQLite INTEGER (signed 64-bit)
MIN_INTEGER = -2**63
MAX_INTEGER = 2**63 - 1
