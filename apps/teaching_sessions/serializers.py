def _iso(value):
    return value.isoformat() if value else None


def session_to_dict(session, attachment_counts=None):
    data = {
        'id': session.pk,
        'type': session.type,
        'type_label': session.get_type_display(),
        'original_type': session.original_type,
        'date': _iso(session.date),
        'time_slot': session.time_slot,
        'time_slot_label': session.get_time_slot_display(),
        'teacher_id': session.teacher_id,
        'teacher_name': session.display_teacher_name,
        'in_pacte': session.in_pacte,
        'status': session.status,
        'status_label': session.get_status_display(),
        'version': session.version,
        'created_at': _iso(session.created_at),
        'updated_at': _iso(session.updated_at),
        'updated_by': session.updated_by_id,
        'reviewed_by': session.reviewed_by_id,
        'reviewed_at': _iso(session.reviewed_at),
        'validated_by': session.validated_by_id,
        'validated_at': _iso(session.validated_at),
        'rejection_reason': session.rejection_reason,
        'review_comment': session.review_comment,
        'comment': session.comment,
        'replaced_teacher_prefix': session.replaced_teacher_prefix,
        'replaced_teacher_last_name': session.replaced_teacher_last_name,
        'replaced_teacher_first_name': session.replaced_teacher_first_name,
        'replaced_teacher_name': session.replaced_teacher_name,
        'class_name': session.class_name,
        'subject': session.subject,
        'student_count': session.student_count,
        'grade_level': session.grade_level,
        'description': session.description,
        'missing_fields': session.payload.missing_fields(),
    }
    if attachment_counts is not None:
        data['attachments'] = attachment_counts
    return data
