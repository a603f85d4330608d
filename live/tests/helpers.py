# live/tests/helpers.py
from datetime import time

from live.models import LiveSchedule, Platform, PlatformAccount
from users.models import User


def make_account(name='Mudeer TikTok'):
    platform = Platform.objects.create(name='TikTok')
    return PlatformAccount.objects.create(platform=platform, name=name)


def make_host(email='host@example.com', name='Ustazah Hana'):
    return User.objects.create_user(email=email, name=name, role='live_host')


def make_schedule(account, host=None, day_of_week=1, created_by=None, **kwargs):
    return LiveSchedule.objects.create(
        platform_account=account,
        live_host=host,
        day_of_week=day_of_week,
        start_time=kwargs.pop('start_time', time(20, 0)),
        end_time=kwargs.pop('end_time', time(22, 0)),
        created_by=created_by,
        **kwargs,
    )
