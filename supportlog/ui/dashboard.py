"""Streamlit front end for capturing, reviewing and exporting support records."""
from pathlib import Path
from typing import Callable, List

import streamlit as st

# Allow running via "streamlit run supportlog/ui/dashboard.py" without installing the package
# by ensuring the repository root is on ``sys.path``.
if __package__ in {None, ""}:
    import sys

    sys.path.append(str(Path(__file__).resolve().parents[2]))

from supportlog.app import Application
from supportlog.core.auth import (
    FORM_TABS,
    TAB_DASHBOARD,
    TAB_ESCALATION,
    TAB_GENERAL,
    TAB_RECORDS,
    TAB_VALIDATION,
    Role,
    allowed_tabs,
)
from supportlog.core.config import AppConfig
from supportlog.core.errors import MissingTableError, SupportLogError, describe_error
from supportlog.core.logging import configure_logging
from supportlog.core.models import (
    NO,
    SIC_OPTIONS,
    STATUS_OPEN,
    SUBJECT_OPTIONS,
    YES,
    RecordType,
    SupportRecord,
)
from supportlog.core.utils import format_display_date
from supportlog.forms.state import FormState
from supportlog.reporting.export import ExportFilter, export_report
from supportlog.reporting.summary import generate_summary
from supportlog.review.workflow import dashboard_stats, escalation_records, records_to_rows, search_records
from supportlog.store.schema import setup_sql

TAB_LABELS = {
    TAB_GENERAL: "Geral",
    TAB_VALIDATION: "Escala",
    TAB_ESCALATION: "Chamado Escalado",
    TAB_DASHBOARD: "Dashboard",
    TAB_RECORDS: "Registros",
}

FORM_TITLES = {
    RecordType.GENERAL: "Dados do Atendimento",
    RecordType.VALIDATION: "Checklist de Escalada / Validação",
    RecordType.ESCALATION: "Registro de Chamado Escalado",
}

EXPORT_LABELS = {
    ExportFilter.ALL: "Relatório completo",
    ExportFilter.VALIDATED: "Validados (VLDD)",
    ExportFilter.NOT_VALIDATED: "Não validados (NVLDD)",
    ExportFilter.ESCALATED: "Escaladas",
}


def _application() -> Application:
    """Build the application once per browser session."""

    if "app" not in st.session_state:
        configure_logging()
        st.session_state.app = Application(AppConfig.load())
        st.session_state.form_generation = 0
    return st.session_state.app


def _rerun_app() -> None:
    """Trigger a Streamlit rerun, compatible with newer and older APIs."""

    rerun = getattr(st, "rerun", None) or getattr(st, "experimental_rerun", None)
    if not rerun:
        raise RuntimeError("Streamlit does not expose a rerun helper.")
    rerun()


def _refresh_widgets() -> None:
    """Widgets are keyed per generation so a reset form re-reads the draft."""

    st.session_state.form_generation = st.session_state.get("form_generation", 0) + 1


def _key(name: str) -> str:
    return f"{name}_{st.session_state.get('form_generation', 0)}"


def _remember_feedback(message: str, level: str) -> None:
    st.session_state["last_action"] = {"message": message, "level": level}


def _render_feedback() -> None:
    feedback = st.session_state.pop("last_action", None)
    if not feedback:
        return
    renderer = {
        "success": st.success,
        "warning": st.warning,
        "info": st.info,
        "error": st.error,
    }.get(feedback["level"], st.info)
    renderer(feedback["message"])


def _run_action(app: Application, action: Callable[[], None], success: str | None = None) -> None:
    """Run a controller action, turning failures into operator feedback."""

    try:
        action()
    except MissingTableError as exc:
        st.session_state["open_sql"] = True
        _remember_feedback(*describe_error(exc, app.config.table))
    except SupportLogError as exc:
        _remember_feedback(*describe_error(exc, app.config.table))
    else:
        if success:
            _remember_feedback(success, "success")
    _rerun_app()


# -- form widgets -------------------------------------------------------------


def _text(form: FormState, label: str, name: str, area: bool = False, **kwargs) -> None:
    widget = st.text_area if area else st.text_input
    current = getattr(form.draft, name)
    value = widget(label, value=current, key=_key(name), **kwargs)
    if value != current:
        form.set_field(name, value)


def _yes_no(form: FormState, label: str, name: str, allow_unset: bool = False) -> None:
    options = ["", YES, NO] if allow_unset else [YES, NO]
    current = getattr(form.draft, name)
    value = st.radio(
        label,
        options=options,
        index=options.index(current) if current in options else 0,
        format_func=lambda option: option or "Não informado",
        horizontal=True,
        key=_key(name),
    )
    if value != current:
        form.set_field(name, value)


def _time_fields(form: FormState, start_label: str, end_label: str) -> None:
    cols = st.columns([2, 2, 1])
    with cols[0]:
        _text(form, start_label, "start_time", help="AAAA-MM-DDTHH:MM")
    with cols[1]:
        _text(form, end_label, "end_time", help="Em branco: hora do registro")
    with cols[2]:
        st.write("")
        if st.button("Agora", key=_key("end_now")):
            form.set_end_time_to_now()
            _refresh_widgets()
            _rerun_app()


def _general_form(form: FormState) -> None:
    cols = st.columns(2)
    with cols[0]:
        _text(form, "Nome do Analista *", "analyst_name")
        _text(form, "Task", "task")
    with cols[1]:
        _text(form, "Local / Agência", "location_name")
        _text(form, "SR", "sr")

    labels = [""] + [label for _, label in SUBJECT_OPTIONS]
    current = form.draft.subject
    subject = st.selectbox(
        "Assunto *",
        options=labels,
        index=labels.index(current) if current in labels else 0,
        format_func=lambda option: option or "Selecione...",
        key=_key("subject"),
    )
    if subject != current:
        form.set_field("subject", subject)

    _yes_no(form, "Chamado Escalado?", "is_escalated")
    if form.draft.is_escalated == YES:
        _text(form, "Analista do Banco", "bank_analyst_name")
    _text(form, "Problema Relatado (Técnico)", "problem_description", area=True)
    _text(form, "Ação do Analista", "action_taken", area=True)
    _time_fields(form, "Início Suporte", "Fim Suporte")

    cols = st.columns(3)
    with cols[0]:
        _yes_no(form, "Ligação Devida", "valid_call")
    with cols[1]:
        _yes_no(form, "Houve Ensinamento", "training_provided")
    with cols[2]:
        _yes_no(form, "Utilizou ACFS", "used_acfs")


def _validation_form(form: FormState) -> None:
    cols = st.columns(3)
    with cols[0]:
        _text(form, "Nome do Analista *", "analyst_name")
    with cols[1]:
        _text(form, "Local / Agência", "location_name")
    with cols[2]:
        _text(form, "Task", "task")
    _text(form, "Defeito Reclamado (Cliente)", "customer_complaint", area=True)

    st.markdown("#### Checklist")
    _yes_no(form, "Validado?", "is_validated", allow_unset=True)
    _yes_no(form, "Plano de Ação Efetivo?", "is_action_plan_effective")
    _yes_no(form, "Peça Trocada?", "was_part_changed")
    if form.draft.was_part_changed == YES:
        _text(form, "Qual peça?", "part_changed_description")
    _yes_no(form, "Diag Completo?", "used_diag_validation")
    _yes_no(form, "Cartão Teste?", "used_test_card")

    st.caption("SIC Verificado")
    sic_cols = st.columns(len(SIC_OPTIONS))
    for col, option in zip(sic_cols, SIC_OPTIONS):
        with col:
            checked = option in form.draft.sic_options
            if st.checkbox(option, value=checked, key=_key(f"sic_{option}")) != checked:
                form.toggle_set_member("sic_options", option)

    cols = st.columns(2)
    with cols[0]:
        _text(form, "Acompanhamento (Nome)", "customer_name")
    with cols[1]:
        _text(form, "Matrícula", "customer_badge")
    _time_fields(form, "Início", "Fim")


def _escalation_form(form: FormState) -> None:
    cols = st.columns(2)
    with cols[0]:
        _text(form, "Data da Escalada", "escalation_date", help="AAAA-MM-DDTHH:MM")
        _text(form, "Task / Chamado", "task")
        _text(form, "Analista Responsável *", "analyst_name")
    with cols[1]:
        _text(form, "Local / Agência", "location_name")
        _text(form, "Técnico", "technician_name")
    _text(form, "Defeito Reclamado (Cliente)", "customer_complaint", area=True)


FORM_RENDERERS = {
    RecordType.GENERAL: _general_form,
    RecordType.VALIDATION: _validation_form,
    RecordType.ESCALATION: _escalation_form,
}


def _render_form_tab(app: Application) -> None:
    form = app.form
    controller = app.controller
    form_col, summary_col = st.columns([3, 2])

    with form_col:
        st.subheader(FORM_TITLES[form.mode])
        FORM_RENDERERS[form.mode](form)

        action_cols = st.columns(2)
        with action_cols[0]:
            if st.button("Registrar e copiar", type="primary"):
                def _create() -> None:
                    controller.create()
                    _refresh_widgets()

                _run_action(app, _create, "Registro salvo. Resumo pronto para colar.")
        with action_cols[1]:
            if st.button("Limpar campos", type="secondary"):
                form.reset()
                _refresh_widgets()
                _rerun_app()

    with summary_col:
        st.subheader("Resumo")
        st.code(form.summary, language=None)
        if app.clipboard.text:
            with st.expander("Último resumo registrado", expanded=False):
                st.code(app.clipboard.text, language=None)

    if controller.history:
        st.markdown("#### Histórico recente")
        st.dataframe(
            _history_rows(controller.history[:10], app.config.locale),
            use_container_width=True,
            hide_index=True,
        )


# -- review tabs ----------------------------------------------------------------


def _history_rows(records: List[SupportRecord], locale: str) -> List[dict]:
    rows = []
    for row in records_to_rows(records):
        rows.append(
            {
                "Início": format_display_date(row["start_time"], locale),
                "Tipo": row["type_label"],
                "Analista": row["analyst_name"],
                "Local": row["location_name"],
                "Task": row["task"],
                "SR": row["sr"],
                "Status": row["status"],
            }
        )
    return rows


def _render_dashboard_tab(app: Application) -> None:
    controller = app.controller
    records = escalation_records(controller.history)
    stats = dashboard_stats(records)

    metric_cols = st.columns(3)
    metric_cols[0].metric("Total escaladas", stats["total"])
    metric_cols[1].metric("Abertas", stats["open"])
    metric_cols[2].metric("Fechadas", stats["closed"])

    if not records:
        st.info("Nenhum chamado escalado registrado.")
        return

    for record in records:
        cols = st.columns([3, 2, 1, 1])
        with cols[0]:
            st.markdown(
                f"**{record.task or 'Sem task'}** | {record.location_name or '-'}  \n"
                f"{record.customer_complaint or record.problem_description or ''}"
            )
        with cols[1]:
            st.caption(
                f"{format_display_date(record.escalation_date or record.start_time, app.config.locale)}"
                f" | {record.technician_name or record.bank_analyst_name or '-'}"
            )
        with cols[2]:
            label = "Fechar" if record.status == STATUS_OPEN else "Reabrir"
            if st.button(f"{record.status} → {label}", key=f"status_{record.id}"):
                _run_action(app, lambda r=record: controller.toggle_status(r.id, r.status))
        with cols[3]:
            options = [YES, NO]
            current = record.escalation_validation if record.escalation_validation in options else NO
            choice = st.selectbox(
                "Validação",
                options=options,
                index=options.index(current),
                key=f"validation_{record.id}",
                label_visibility="collapsed",
            )
            if choice != current:
                _run_action(
                    app,
                    lambda r=record, value=choice: controller.update(r.id, "escalation_validation", value),
                )


def _render_export(app: Application) -> None:
    controller = app.controller
    st.markdown("#### Relatórios")
    cols = st.columns([2, 1])
    with cols[0]:
        kind = st.selectbox(
            "Filtro",
            options=list(ExportFilter),
            format_func=lambda option: EXPORT_LABELS[option],
            key="export_filter",
        )
    with cols[1]:
        st.write("")
        if st.button("Gerar relatório"):
            try:
                st.session_state["export_result"] = export_report(
                    controller.history, kind, controller.role, app.config.locale
                )
            except SupportLogError as exc:
                st.session_state.pop("export_result", None)
                _remember_feedback(*describe_error(exc, app.config.table))
                _rerun_app()

    result = st.session_state.get("export_result")
    if result:
        st.download_button(
            f"Baixar {result.filename} ({result.row_count} registros)",
            data=result.encoded(),
            file_name=result.filename,
            mime=result.mime_type,
        )


def _render_records_tab(app: Application) -> None:
    controller = app.controller
    term = st.text_input("Buscar por task, SR, analista ou local", key="records_search")
    records = search_records(controller.history, term)

    if st.button("Recarregar do banco", type="secondary"):
        controller.fetch_all()
        _rerun_app()

    if not records:
        st.info("Nenhum registro encontrado.")
    else:
        st.dataframe(_history_rows(records, app.config.locale), use_container_width=True, hide_index=True)

        ids = [record.id for record in records]
        labels = {
            record.id: f"{record.task or 'Sem task'} | {record.analyst_name} | {record.record_type.value}"
            for record in records
        }
        current = controller.selected_id if controller.selected_id in ids else None
        chosen = st.selectbox(
            "Ver registro",
            options=[None, *ids],
            index=([None, *ids]).index(current),
            format_func=lambda record_id: labels.get(record_id, "Selecione..."),
            key="records_selected",
        )
        controller.select(chosen)

        selected = controller.selected
        if selected:
            st.code(generate_summary(selected, selected.record_type, app.config.locale), language=None)
            if st.button("Excluir registro", type="secondary", disabled=controller.role != Role.ADMIN):
                _run_action(app, lambda: controller.delete(selected.id), "Registro excluído.")

    _render_export(app)


# -- settings -------------------------------------------------------------------


def _render_settings(app: Application) -> None:
    with st.sidebar:
        st.subheader("Sessão")
        st.caption(f"{app.controller.session.email} ({app.controller.role.value})")

        st.subheader("Banco de dados")
        if app.config.is_remote:
            st.success(f"Online ({app.config.source})")
        else:
            st.warning("Modo offline (memória)")

        url = st.text_input("URL do banco", value=app.config.store_url, key="config_url")
        key = st.text_input("Chave de acesso", value=app.config.store_key, type="password", key="config_key")
        cols = st.columns(2)
        with cols[0]:
            if st.button("Salvar"):
                _run_action(app, lambda: app.save_store_settings(url, key), "Configuração aplicada.")
        with cols[1]:
            if st.button("Modo offline"):
                _run_action(app, app.clear_store_settings, "Conexão removida; usando memória.")

        if st.session_state.pop("open_sql", False):
            st.session_state["show_sql"] = True
        if st.toggle("Ver SQL", key="show_sql"):
            st.code(setup_sql(app.config.table), language="sql")


def _render_banner(app: Application) -> None:
    banner = app.controller.banner
    if not banner:
        return
    st.error(banner.message)
    if banner.remediation and st.button("Corrigir agora"):
        st.session_state["open_sql"] = True
        _rerun_app()


def main() -> None:
    """Launch the support logging dashboard."""

    st.set_page_config(page_title="Registro de Atendimento HW", layout="wide")
    app = _application()

    st.title("Registro de Atendimento HW")
    _render_banner(app)
    _render_settings(app)
    _render_feedback()

    tabs = allowed_tabs(app.controller.role)
    active = st.radio(
        "Aba",
        options=tabs,
        format_func=lambda tab: TAB_LABELS[tab],
        horizontal=True,
        key="active_tab",
        label_visibility="collapsed",
    )

    if active in FORM_TABS:
        app.form.set_mode(FORM_TABS[active])
        _render_form_tab(app)
    elif active == TAB_DASHBOARD:
        _render_dashboard_tab(app)
    elif active == TAB_RECORDS:
        _render_records_tab(app)


if __name__ == "__main__":
    main()
