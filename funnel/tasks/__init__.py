"""
Funnel.vc Celery Tasks

Task Modules:
    - crm: Monday.com sync for accepted pitches

Usage:
    from funnel.tasks.crm import sync_pitch_to_crm

    sync_pitch_to_crm.delay(build_crm_payload(vc, founder))
"""

__all__ = ["crm"]
