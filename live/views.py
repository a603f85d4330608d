# live/views.py
"""
Live streaming schedule and session management views.
"""
import logging
from datetime import datetime

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.paginator import Paginator
from django.db.models import Q
from django.shortcuts import get_object_or_404, redirect, render
from django.views.decorators.http import require_POST

from core.decorators import admin_required
from core.exceptions import SessionStateError
from shared.constants import DAYS_OF_WEEK, LiveSessionStatus

from .forms import LiveScheduleForm, LiveSessionForm
from .models import LiveSchedule, LiveSession, Platform, PlatformAccount
from .services import LiveScheduleService, source_filter

logger = logging.getLogger(__name__)


# ============ SCHEDULES ============

@login_required
@admin_required
def schedule_list_view(request):
    schedules = LiveSchedule.objects.select_related(
        'platform_account__platform', 'live_host', 'created_by'
    ).order_by('day_of_week', 'start_time')

    search_query = request.GET.get('search', '').strip()
    platform_filter = request.GET.get('platform', '')
    account_filter = request.GET.get('account', '')
    day_filter = request.GET.get('day', '')
    active_filter = request.GET.get('active', '')

    if search_query:
        schedules = schedules.filter(
            Q(platform_account__name__icontains=search_query) |
            Q(live_host__name__icontains=search_query)
        )
    if platform_filter.isdigit():
        schedules = schedules.filter(platform_account__platform_id=platform_filter)
    if account_filter.isdigit():
        schedules = schedules.filter(platform_account_id=account_filter)
    if day_filter.isdigit():
        schedules = schedules.filter(day_of_week=day_filter)
    if active_filter in ('1', '0'):
        schedules = schedules.filter(is_active=active_filter == '1')

    page_obj = Paginator(schedules, 50).get_page(request.GET.get('page'))

    context = {
        'schedules': page_obj,
        'page_obj': page_obj,
        'calendar': LiveScheduleService.calendar(page_obj.object_list),
        'platforms': Platform.objects.filter(is_active=True),
        'accounts': PlatformAccount.objects.select_related('platform'),
        'days': DAYS_OF_WEEK,
        'search_query': search_query,
        'platform_filter': platform_filter,
        'account_filter': account_filter,
        'day_filter': day_filter,
        'active_filter': active_filter,
        'page_title': 'Live Schedules',
    }
    return render(request, 'live/schedule_list.html', context)


@login_required
@admin_required
def schedule_create_view(request):
    if request.method == 'POST':
        form = LiveScheduleForm(request.POST)
        if form.is_valid():
            schedule = form.save(commit=False)
            schedule.created_by = request.user
            schedule.save()
            logger.info(f"Live schedule {schedule.pk} created by user {request.user.pk}")
            messages.success(request, "Schedule created successfully!")
            return redirect('live:schedule_list')
    else:
        form = LiveScheduleForm()

    return render(request, 'live/schedule_form.html', {
        'form': form,
        'page_title': 'Add Schedule',
    })


@login_required
@admin_required
def schedule_edit_view(request, schedule_id):
    schedule = get_object_or_404(LiveSchedule, pk=schedule_id)

    if request.method == 'POST':
        form = LiveScheduleForm(request.POST, instance=schedule)
        if form.is_valid():
            form.save()
            messages.success(request, "Schedule updated successfully!")
            return redirect('live:schedule_list')
    else:
        form = LiveScheduleForm(instance=schedule)

    return render(request, 'live/schedule_form.html', {
        'form': form,
        'schedule': schedule,
        'page_title': 'Edit Schedule',
    })


@login_required
@admin_required
@require_POST
def schedule_toggle_view(request, schedule_id):
    schedule = get_object_or_404(LiveSchedule, pk=schedule_id)
    LiveScheduleService.toggle_active(schedule)
    state = 'activated' if schedule.is_active else 'deactivated'
    messages.success(request, f"Schedule {state} successfully!")
    return redirect('live:schedule_list')


@login_required
@admin_required
@require_POST
def schedule_delete_view(request, schedule_id):
    schedule = get_object_or_404(LiveSchedule, pk=schedule_id)
    schedule.delete()
    logger.info(f"Live schedule {schedule_id} deleted by user {request.user.pk}")
    messages.success(request, "Schedule deleted successfully!")
    return redirect('live:schedule_list')


# ============ SESSIONS ============

@login_required
@admin_required
def session_list_view(request):
    sessions = LiveSession.objects.select_related(
        'platform_account__platform', 'live_host', 'live_schedule__created_by'
    ).order_by('-scheduled_start_at')

    search_query = request.GET.get('search', '').strip()
    status_filter = request.GET.get('status', '')
    platform_filter = request.GET.get('platform', '')
    account_filter = request.GET.get('account', '')
    date_filter = request.GET.get('date', '')
    source = request.GET.get('source', '')

    if search_query:
        sessions = sessions.filter(
            Q(title__icontains=search_query) |
            Q(description__icontains=search_query) |
            Q(platform_account__name__icontains=search_query) |
            Q(live_host__name__icontains=search_query)
        )
    if status_filter:
        sessions = sessions.filter(status=status_filter)
    if platform_filter.isdigit():
        sessions = sessions.filter(platform_account__platform_id=platform_filter)
    if account_filter.isdigit():
        sessions = sessions.filter(platform_account_id=account_filter)
    if date_filter:
        try:
            sessions = sessions.filter(
                scheduled_start_at__date=datetime.strptime(date_filter, '%Y-%m-%d').date()
            )
        except ValueError:
            date_filter = ''
    if source in (LiveSession.SOURCE_ADMIN, LiveSession.SOURCE_SELF):
        sessions = sessions.filter(source_filter(source))

    page_obj = Paginator(sessions, 20).get_page(request.GET.get('page'))

    context = {
        'sessions': page_obj,
        'page_obj': page_obj,
        'platforms': Platform.objects.filter(is_active=True),
        'accounts': PlatformAccount.objects.select_related('platform'),
        'status_choices': LiveSessionStatus.CHOICES,
        'source_choices': LiveSession.SOURCE_CHOICES,
        'search_query': search_query,
        'status_filter': status_filter,
        'platform_filter': platform_filter,
        'account_filter': account_filter,
        'date_filter': date_filter,
        'source': source,
        'page_title': 'Live Sessions',
    }
    return render(request, 'live/session_list.html', context)


@login_required
@admin_required
def session_detail_view(request, session_id):
    session = get_object_or_404(
        LiveSession.objects.select_related('platform_account__platform', 'live_host', 'live_schedule'),
        pk=session_id,
    )
    return render(request, 'live/session_detail.html', {
        'session': session,
        'page_title': session.title,
    })


@login_required
@admin_required
def session_create_view(request):
    if request.method == 'POST':
        form = LiveSessionForm(request.POST)
        if form.is_valid():
            session = form.save()
            messages.success(request, "Live session created successfully!")
            return redirect('live:session_detail', session_id=session.pk)
    else:
        form = LiveSessionForm()

    return render(request, 'live/session_form.html', {
        'form': form,
        'page_title': 'Add Live Session',
    })


@login_required
@admin_required
def session_edit_view(request, session_id):
    session = get_object_or_404(LiveSession, pk=session_id)

    if request.method == 'POST':
        form = LiveSessionForm(request.POST, instance=session)
        if form.is_valid():
            form.save()
            messages.success(request, "Live session updated successfully!")
            return redirect('live:session_detail', session_id=session.pk)
    else:
        form = LiveSessionForm(instance=session)

    return render(request, 'live/session_form.html', {
        'form': form,
        'session': session,
        'page_title': 'Edit Live Session',
    })


SESSION_ACTIONS = {
    'start': ('start', "Live session started."),
    'end': ('end', "Live session ended."),
    'cancel': ('cancel', "Live session cancelled."),
}


@login_required
@admin_required
@require_POST
def session_action_view(request, session_id, action):
    session = get_object_or_404(LiveSession, pk=session_id)

    if action not in SESSION_ACTIONS:
        messages.error(request, "Unknown session action.")
        return redirect('live:session_detail', session_id=session.pk)

    method_name, success_message = SESSION_ACTIONS[action]
    try:
        getattr(session, method_name)()
        messages.success(request, success_message)
    except SessionStateError as e:
        messages.error(request, e.message)

    return redirect('live:session_detail', session_id=session.pk)
