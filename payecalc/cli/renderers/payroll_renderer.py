"""Rich renderer for payroll lines and batches.

Transforms SDK JSON output (to_plain() of a PayrollLineResult or
BatchSummary) into formatted Rich tables.
"""

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table


def render_line(console: Console, data: dict) -> None:
    """Render one payroll line.

    Args:
        console: Rich Console instance
        data: to_plain(PayrollLineResult.model_dump())
    """
    for warning in data.get("warnings", []):
        console.print(Panel(
            f"[yellow]{warning['message']}[/yellow]",
            title=warning["code"],
            border_style="yellow",
        ))

    _render_pay_table(console, data)
    _render_breakdown(console, data.get("tax_breakdown", []))
    _render_recommendations(console, data.get("eligibility", {}))


def _render_pay_table(console: Console, data: dict) -> None:
    statutory = data.get("statutory_deductions", {})
    employee = data.get("employee_id") or "employee"

    table = Table(title=f"Payroll: {employee} (config v{data.get('config_version', '?')})", box=box.ROUNDED)
    table.add_column("", style="bold", min_width=28)
    table.add_column("Monthly", justify="right", min_width=16)

    table.add_row("[bold]EARNINGS[/bold]", "")
    table.add_row("  Gross Salary", _fmt(data.get("gross_salary")))
    table.add_row("  Pensionable Emoluments", _fmt(data.get("pensionable_emoluments")), style="dim")
    table.add_row("", "")

    table.add_row("[bold]TAX[/bold]", "")
    table.add_row("  Taxable Income (annual)", _fmt(data.get("taxable_income")), style="dim")
    table.add_row("  Annual Tax", _fmt(data.get("annual_tax")), style="dim")
    table.add_row("  PAYE", _fmt(data.get("paye_tax")))
    table.add_row("", "")

    table.add_row("[bold]STATUTORY DEDUCTIONS[/bold]", "")
    table.add_row("  Pension", _fmt(statutory.get("pension")))
    if statutory.get("voluntary_pension"):
        table.add_row("    incl. voluntary", _fmt(statutory.get("voluntary_pension")), style="dim")
    table.add_row("  NHF", _fmt(statutory.get("nhf")))
    table.add_row("  NHIS", _fmt(statutory.get("nhis")))
    table.add_row("  [dim]Total Deductions[/dim]", f"[dim]{_fmt(data.get('total_deductions'))}[/dim]")
    table.add_row("", "")

    table.add_row("[bold green]NET PAY[/bold green]", f"[bold green]{_fmt(data.get('net_salary'))}[/bold green]")
    table.add_row("", "")

    table.add_row("[bold]EMPLOYER[/bold]", "")
    table.add_row("  Pension", _fmt(statutory.get("employer_pension")))
    table.add_row("  NSITF", _fmt(statutory.get("nsitf")))
    table.add_row("  ITF", _fmt(statutory.get("itf")))
    table.add_row("  Employer Cost", _fmt(data.get("employer_cost")))

    console.print(table)


def _render_breakdown(console: Console, breakdown: list) -> None:
    if not breakdown:
        return

    table = Table(title="Tax by Bracket (annual)", box=box.SIMPLE)
    table.add_column("Bracket")
    table.add_column("Rate", justify="right")
    table.add_column("Taxable", justify="right")
    table.add_column("Tax", justify="right")

    for line in breakdown:
        bracket = line["bracket"]
        upper = "∞" if bracket.get("max") is None else f"{bracket['max']:,}"
        table.add_row(
            f"{bracket['min']:,} - {upper}",
            f"{bracket['rate'] * 100:.1f}%",
            _fmt(line["taxable_in_bracket"]),
            _fmt(line["tax_in_bracket"]),
        )

    console.print(table)


def _render_recommendations(console: Console, eligibility: dict) -> None:
    summary = eligibility.get("summary", {})
    recommendations = eligibility.get("recommendations", [])

    status = summary.get("compliance_status", "?")
    color = "green" if status == "COMPLIANT" else "yellow"

    if recommendations:
        table = Table(title="Reliefs & Recommendations", box=box.SIMPLE)
        table.add_column("Type")
        table.add_column("Priority")
        table.add_column("Annual Benefit", justify="right")
        table.add_column("Action")
        for rec in recommendations:
            table.add_row(
                rec["type"],
                rec["priority"],
                _fmt(rec["estimated_annual_benefit"]),
                rec["action"],
            )
        console.print(table)

    console.print(
        f"Exemptions: {summary.get('total_exemptions', 0)}  "
        f"Optimizations: {summary.get('total_optimizations', 0)}  "
        f"Est. annual savings: {_fmt(summary.get('estimated_annual_savings'))}  "
        f"Status: [{color}]{status}[/{color}]"
    )


def render_batch(console: Console, lines: list, summary: dict) -> None:
    """Render one row per employee, then batch totals.

    Args:
        console: Rich Console instance
        lines: to_plain() of each PayrollLineResult
        summary: to_plain(BatchSummary.model_dump())
    """
    table = Table(title=f"Payroll Batch ({summary.get('total_employees', len(lines))} employees)", box=box.ROUNDED)
    table.add_column("Employee")
    table.add_column("Gross", justify="right")
    table.add_column("PAYE", justify="right")
    table.add_column("Statutory", justify="right")
    table.add_column("Net", justify="right")
    table.add_column("Status")

    for line in lines:
        status = line.get("eligibility", {}).get("summary", {}).get("compliance_status", "?")
        if line.get("warnings"):
            status = f"[yellow]{len(line['warnings'])} warning(s)[/yellow]"
        table.add_row(
            line.get("employee_id") or "-",
            _fmt(line.get("gross_salary")),
            _fmt(line.get("paye_tax")),
            _fmt(line.get("statutory_deductions", {}).get("total")),
            _fmt(line.get("net_salary")),
            status,
        )

    table.add_section()
    table.add_row(
        "[bold]TOTAL[/bold]",
        _fmt(summary.get("total_gross")),
        _fmt(summary.get("total_paye")),
        _fmt(summary.get("total_statutory_deductions")),
        _fmt(summary.get("total_net")),
        "",
    )
    console.print(table)

    console.print(f"Employer cost: {_fmt(summary.get('total_employer_cost'))}")
    console.print(
        f"Reliefs: {summary.get('employees_with_reliefs', 0)} employee(s), "
        f"rent {_fmt(summary.get('total_rent_relief'))}, "
        f"NHF exemptions {summary.get('total_nhf_exemptions', 0)}"
    )
    if summary.get("employees_needing_review"):
        console.print(
            f"[yellow]{summary['employees_needing_review']} employee(s) need review "
            f"({summary.get('total_warnings', 0)} warning(s))[/yellow]"
        )


def _fmt(amount: float | None) -> str:
    """Format Naira amount."""
    if amount is None:
        return "-"
    return f"₦{amount:,.2f}"
