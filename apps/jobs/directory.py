# apps/jobs/directory.py
from .models import Application, Job


def get_job_snapshot(job_id):
    """Return {id, title, employer_id} for a job, or None if it is gone."""
    if job_id is None:
        return None
    job = Job.objects.filter(id=job_id).only("id", "title", "employer_id").first()
    return job.snapshot() if job else None


def get_job_snapshots(job_ids):
    ids = {job_id for job_id in job_ids if job_id is not None}
    if not ids:
        return {}
    jobs = Job.objects.filter(id__in=ids).only("id", "title", "employer_id")
    return {job.id: job.snapshot() for job in jobs}


def is_job_owned_by(employer_id, job_id):
    return Job.objects.filter(id=job_id, employer_id=employer_id).exists()


def application_exists(job_id, user_id):
    return Application.objects.filter(job_id=job_id, user_id=user_id).exists()


def _applicant_row(application):
    return {
        "user_id": application.user_id,
        "application_id": application.id,
        "job_id": application.job_id,
        "status": application.status,
        "created_at": application.created_at,
    }


def list_applicants(job_id):
    """Everyone who applied to the job, newest application first."""
    applications = Application.objects.filter(job_id=job_id).order_by('-created_at', '-id')
    return [_applicant_row(application) for application in applications]


def list_applications_for(user_id):
    """A jobseeker's own applications, with the employer of each job."""
    applications = (
        Application.objects.filter(user_id=user_id)
        .select_related('job')
        .order_by('-created_at', '-id')
    )
    rows = []
    for application in applications:
        row = _applicant_row(application)
        row["employer_id"] = application.job.employer_id
        rows.append(row)
    return rows
