"""Plain-text summaries pasted into the external ticketing system."""
from __future__ import annotations

from typing import List

from supportlog.core.models import NO, YES, RecordType, SupportRecord
from supportlog.core.utils import format_display_date

SEPARATOR = "-" * 40

GENERAL_HEADER = "=== REGISTRO DE ATENDIMENTO HW ==="
VALIDATION_HEADER = "=== ESCALADA / VALIDAÇÃO ==="
ESCALATION_HEADER = "=== CHAMADO / ESCALADO ==="

VALIDATED_TAG = "#VLDD#"
NOT_VALIDATED_TAG = "#NVLDD#"


def _validation_lines(record: SupportRecord, locale: str) -> List[str]:
    tag = ""
    if record.is_validated == YES:
        tag = VALIDATED_TAG
    elif record.is_validated == NO:
        tag = NOT_VALIDATED_TAG

    part_changed = f"Peça Trocada? {record.was_part_changed}"
    if record.was_part_changed == YES:
        part_changed += f" ({record.part_changed_description})"

    badge = f"(Mat: {record.customer_badge})" if record.customer_badge else ""
    sic = ", ".join(record.sic_options) if record.sic_options else "Nenhum"

    return [
        f"{tag} {VALIDATION_HEADER}".strip(),
        f"Analista: {record.analyst_name}",
        f"Local: {record.location_name}",
        f"Task: {record.task}",
        SEPARATOR,
        "Defeito Reclamado (Cliente):",
        record.customer_complaint,
        SEPARATOR,
        ">>> CHECKLIST <<<",
        f"Validado? {record.is_validated}",
        f"Plano de Ação Efetivo? {record.is_action_plan_effective}",
        part_changed,
        f"Diag Completo? {record.used_diag_validation}",
        f"Cartão Teste? {record.used_test_card}",
        f"SIC Verificado: {sic}",
        f"Acompanhamento: {record.customer_name} {badge}",
        SEPARATOR,
        f"Início: {format_display_date(record.start_time, locale)}",
        f"Fim: {format_display_date(record.end_time, locale)}",
    ]


def _escalation_lines(record: SupportRecord, locale: str) -> List[str]:
    return [
        ESCALATION_HEADER,
        f"Data da Escalada: {format_display_date(record.escalation_date, locale)}",
        f"Local: {record.location_name}",
        f"Task / Chamado: {record.task}",
        f"Técnico: {record.technician_name}",
        SEPARATOR,
        "Defeito Reclamado (Cliente):",
        record.customer_complaint,
        SEPARATOR,
        f"Analista Responsável: {record.analyst_name}",
    ]


def _general_lines(record: SupportRecord, locale: str) -> List[str]:
    lines = [
        GENERAL_HEADER,
        f"Analista: {record.analyst_name}",
        f"Local: {record.location_name}",
        f"Task: {record.task}",
        f"SR: {record.sr}",
        f"Assunto: {record.subject}",
        f"Chamado Escalado: {record.is_escalated}",
    ]
    if record.is_escalated == YES:
        lines.append(f"Analista do Banco: {record.bank_analyst_name}")
    lines += [
        SEPARATOR,
        "Problema Relatado (Técnico):",
        record.problem_description,
        SEPARATOR,
        "Ação do Analista:",
        record.action_taken,
        SEPARATOR,
        f"Início Suporte: {format_display_date(record.start_time, locale)}",
        f"Fim Suporte: {format_display_date(record.end_time, locale)}",
        f"Ligação Devida: {record.valid_call}",
        f"Houve Ensinamento: {record.training_provided}",
        f"Utilizou ACFS: {record.used_acfs}",
    ]
    return lines


_BUILDERS = {
    RecordType.VALIDATION: _validation_lines,
    RecordType.ESCALATION: _escalation_lines,
    RecordType.GENERAL: _general_lines,
}


def generate_summary(record: SupportRecord, mode: RecordType, locale: str = "pt-BR") -> str:
    """Render the text block for ``record`` in the shape of the given form mode.

    Blank lines (an empty free-text field, for instance) are dropped so the
    pasted block stays compact.
    """

    lines = _BUILDERS[RecordType(mode)](record, locale)
    return "\n".join(line for line in lines if line != "")
