from fpdf import FPDF


class PDFClosing(FPDF):
    def header(self):
        self.set_font('Helvetica', 'B', 20)
        self.set_text_color(33, 37, 41)
        self.cell(0, 10, 'RETAGUARDA', 0, 1, 'L')

        self.set_font('Helvetica', '', 10)
        self.set_text_color(108, 117, 125)
        self.cell(0, 5, 'Fechamento de Caixa', 0, 1, 'L')
        self.ln(5)

        self.set_draw_color(200, 200, 200)
        self.line(10, 35, 200, 35)
        self.ln(10)

    def footer(self):
        self.set_y(-15)
        self.set_font('Helvetica', 'I', 8)
        self.set_text_color(128)
        self.cell(0, 10, f'Página {self.page_no()}', 0, 0, 'C')


def _money(value):
    return f"R$ {value:,.2f}"


def generate_closing_pdf(audit, breakdown):
    """Relatório do fechamento: resumo por forma de pagamento, esperado x contado e status da auditoria."""
    pdf = PDFClosing()
    pdf.add_page()
    pdf.set_auto_page_break(auto=True, margin=15)

    # --- CABEÇALHO ---
    pdf.set_font("Helvetica", "B", 14)
    pdf.set_text_color(0, 0, 0)
    pdf.cell(100, 10, f"AUDITORIA #{audit.id}", 0, 0, 'L')
    pdf.set_font("Helvetica", "", 10)
    pdf.set_text_color(50, 50, 50)
    pdf.cell(90, 10, f"Data: {audit.date.strftime('%d/%m/%Y')}", 0, 1, 'R')
    pdf.ln(2)

    pdf.set_fill_color(245, 247, 250)
    pdf.rect(10, pdf.get_y(), 190, 20, 'F')
    pdf.set_xy(15, pdf.get_y() + 4)
    pdf.set_font("Helvetica", "B", 10)
    pdf.cell(30, 5, "Operador:", 0, 0)
    pdf.set_font("Helvetica", "", 10)
    pdf.cell(100, 5, audit.audited_by, 0, 1)
    pdf.set_x(15)
    pdf.set_font("Helvetica", "B", 10)
    pdf.cell(30, 5, "Status:", 0, 0)
    pdf.set_font("Helvetica", "", 10)
    pdf.cell(100, 5, audit.status.value, 0, 1)
    pdf.ln(10)

    # --- VENDAS POR FORMA DE PAGAMENTO ---
    rows = [
        ("Dinheiro", breakdown.cash_sales),
        ("PIX", breakdown.pix_sales),
        ("Crédito", breakdown.credit_sales),
        ("Débito", breakdown.debit_sales),
        ("Não identificado", breakdown.uncategorized_sales),
    ]
    pdf.set_font("Helvetica", "B", 9)
    pdf.set_fill_color(33, 37, 41)
    pdf.set_text_color(255, 255, 255)
    pdf.cell(130, 8, "FORMA DE PAGAMENTO", 0, 0, 'L', True)
    pdf.cell(60, 8, "TOTAL", 0, 1, 'R', True)

    pdf.set_text_color(0, 0, 0)
    pdf.set_font("Helvetica", "", 9)
    fill = False
    for label, value in rows:
        pdf.set_fill_color(248, 249, 250) if fill else pdf.set_fill_color(255, 255, 255)
        pdf.cell(130, 8, label, 0, 0, 'L', fill)
        pdf.cell(60, 8, _money(value), 0, 1, 'R', fill)
        fill = not fill

    pdf.set_font("Helvetica", "B", 9)
    pdf.cell(130, 8, f"Total PDV ({breakdown.sales_count} vendas)", 0, 0, 'L')
    pdf.cell(60, 8, _money(breakdown.system_calculated_total), 0, 1, 'R')

    # --- CONFERÊNCIA DA GAVETA ---
    pdf.ln(5)
    x_totals = 110
    for label, value in [
        ("Fundo inicial", breakdown.opening_balance),
        ("+ Vendas em dinheiro", breakdown.cash_sales),
        ("+ Reforços", breakdown.supplies),
        ("- Sangrias", breakdown.expenses),
        ("= Esperado", breakdown.expected_cash),
        ("Contado", breakdown.counted_cash),
    ]:
        pdf.set_x(x_totals)
        pdf.set_font("Helvetica", "", 10)
        pdf.cell(50, 6, label, 0, 0, 'R')
        pdf.cell(40, 6, _money(value), 0, 1, 'R')

    pdf.set_x(x_totals)
    pdf.set_font("Helvetica", "B", 12)
    pdf.set_fill_color(240, 240, 240)
    pdf.cell(50, 10, "DIFERENÇA", 0, 0, 'R', True)
    pdf.cell(40, 10, _money(audit.difference_value), 0, 1, 'R', True)

    # --- OBSERVAÇÕES ---
    if audit.notes:
        pdf.ln(10)
        pdf.set_font("Helvetica", "B", 9)
        pdf.cell(0, 5, "Observações:", 0, 1, 'L')
        pdf.set_font("Helvetica", "", 8)
        pdf.multi_cell(0, 4, audit.notes)

    return bytes(pdf.output())
