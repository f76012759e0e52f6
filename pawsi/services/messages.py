"""User-facing copy for notifications and emails (Spanish, like the product UI)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from html import escape
from typing import Optional

from pawsi.core.config import settings

SIGNATURE = '<p>Equipo de Pawsi</p>'


@dataclass(frozen=True)
class EmailMessage:
    subject: str
    html: str


def _label(title: Optional[str], content_id: str) -> str:
    return title or content_id


def _date(value: datetime) -> str:
    return value.strftime('%d/%m/%Y')


def renewal_reminder_text(title: Optional[str], content_id: str) -> str:
    return f'Tu publicación "{_label(title, content_id)}" expira pronto. ¡Renuévala para mantenerla visible!'


def renewal_reminder_email(title: Optional[str], content_id: str, expires_at: datetime) -> EmailMessage:
    label = escape(_label(title, content_id))
    return EmailMessage(
        subject='Tu publicación expira pronto — Pawsi',
        html=(
            '<h2>Tu publicación está por expirar</h2>'
            '<p>Hola,</p>'
            f'<p>Tu publicación <strong>"{label}"</strong> expira el {_date(expires_at)}.</p>'
            f'<p>Para mantenerla visible en Pawsi, puedes renovarla por {settings.RENEWAL_MONTHS} meses más '
            'desde tu panel de usuario.</p>'
            f'<p><a href="{settings.APP_BASE_URL}/dashboard">Renovar Publicación</a></p>'
            '<p>Si no la renuevas, será eliminada automáticamente después de la fecha de expiración.</p>'
            f'{SIGNATURE}'
        ),
    )


def post_deleted_text(title: Optional[str], content_id: str, expired: bool) -> str:
    label = _label(title, content_id)
    if expired:
        return f'Tu publicación "{label}" fue eliminada automáticamente por haber expirado.'
    return f'Tu publicación "{label}" fue eliminada por no cumplir con las normas de la comunidad.'


def post_deleted_email(title: Optional[str], content_id: str, expired: bool) -> EmailMessage:
    label = escape(_label(title, content_id))
    if expired:
        return EmailMessage(
            subject='Tu publicación expiró — Pawsi',
            html=(
                '<h2>Publicación expirada</h2>'
                '<p>Hola,</p>'
                f'<p>Tu publicación <strong>"{label}"</strong> fue eliminada automáticamente por haber expirado.</p>'
                '<p>Si todavía la necesitas, puedes crear una nueva desde tu panel.</p>'
                f'{SIGNATURE}'
            ),
        )
    return EmailMessage(
        subject=f'Tu contenido {escape(content_id)} fue eliminado — Pawsi',
        html=(
            '<h2>Contenido eliminado</h2>'
            '<p>Hola,</p>'
            f'<p>Tu publicación <strong>"{label}"</strong> fue eliminada por no cumplir con las normas de nuestra comunidad.</p>'
            f'<p>Te pedimos que revises nuestros <a href="{settings.APP_BASE_URL}/terms">términos y condiciones</a> '
            'para evitar futuras infracciones.</p>'
            '<p><strong>Nota importante:</strong> La reincidencia en el incumplimiento de las normas puede resultar '
            'en la suspensión o eliminación de tu cuenta.</p>'
            '<p>Si consideras que esto es un error, puedes contactarnos respondiendo a este email.</p>'
            f'{SIGNATURE}'
        ),
    )


def post_renewed_text(title: Optional[str], content_id: str) -> str:
    return f'Tu publicación "{_label(title, content_id)}" ha sido renovada exitosamente.'


def post_renewed_email(title: Optional[str], content_id: str, expires_at: Optional[datetime]) -> EmailMessage:
    label = escape(_label(title, content_id))
    if expires_at is not None:
        detail = f'<p>Nueva fecha de expiración: <strong>{_date(expires_at)}</strong></p>'
    else:
        detail = '<p>Tu publicación ha sido actualizada para aparecer como nueva.</p>'
    return EmailMessage(
        subject='Publicación renovada — Pawsi',
        html=(
            '<h2>Publicación renovada exitosamente</h2>'
            '<p>Hola,</p>'
            f'<p>Tu publicación <strong>"{label}"</strong> ha sido renovada exitosamente.</p>'
            f'{detail}'
            '<p>Gracias por usar Pawsi.</p>'
            f'{SIGNATURE}'
        ),
    )


def report_operator_email(
    report_id: str,
    kind: str,
    content_id: str,
    reason: str,
    description: Optional[str],
    reporter_id: Optional[str],
    created_at: datetime,
    reported_user_id: Optional[str] = None,
) -> EmailMessage:
    details = f'<p><strong>Mensaje:</strong> {escape(description)}</p>' if description else ''
    return EmailMessage(
        subject=f'Nuevo reporte en Pawsi — {kind} {escape(content_id)}',
        html=(
            '<h2>Nuevo reporte recibido</h2>'
            f'<p><strong>ID del reporte:</strong> {report_id}</p>'
            f'<p><strong>Tipo de contenido:</strong> {kind}</p>'
            f'<p><strong>ID del contenido:</strong> {escape(content_id)}</p>'
            f'<p><strong>Razón:</strong> {reason}</p>'
            f'{details}'
            f'<p><strong>Reporter ID:</strong> {reporter_id or "Anónimo"}</p>'
            f'<p><strong>Usuario reportado ID:</strong> {escape(reported_user_id or "N/A")}</p>'
            f'<p><strong>Fecha:</strong> {created_at.strftime("%d/%m/%Y %H:%M")} UTC</p>'
            '<hr>'
            f'<p><a href="{settings.APP_BASE_URL}/admin">Abrir panel de moderación</a></p>'
        ),
    )


def report_received_text(report_id: str) -> str:
    return f'Recibimos tu reporte {report_id}. Gracias por ayudar a mantener nuestra comunidad segura.'


def report_received_email(report_id: str) -> EmailMessage:
    return EmailMessage(
        subject='Recibimos tu reporte — Pawsi',
        html=(
            '<h2>Recibimos tu reporte</h2>'
            '<p>Hola,</p>'
            f'<p>Recibimos tu reporte con ID: <strong>{report_id}</strong></p>'
            '<p>Gracias por ayudar a mantener nuestra comunidad segura. Lo revisaremos pronto.</p>'
            f'{SIGNATURE}'
        ),
    )


def new_message_text(sender_name: str, subject: str) -> str:
    return f'Nuevo mensaje de {sender_name}: {subject}'
