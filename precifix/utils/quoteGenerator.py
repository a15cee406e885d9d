# [ Imports ]
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import cm
from reportlab.pdfgen import canvas
from reportlab.lib.colors import HexColor
from reportlab.platypus import Paragraph
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.enums import TA_CENTER
from datetime import date, datetime
from io import BytesIO
from xml.sax.saxutils import escape
import logging

logger = logging.getLogger(__name__)

PAYMENT_METHOD_LABELS = {
    "cash": "Dinheiro",
    "pix": "PIX",
    "credit_card": "Cartão de Crédito",
    "debit_card": "Cartão de Débito",
}


# ==========================================
# CONFIGURACOES DE DESIGN
# ==========================================
class QuoteDesign:
    PRIMARY = '#000000'
    ACCENT = '#1a237e'
    DARK = '#343a40'
    GRAY = '#6c757d'
    LINE = '#ced4da'
    BACKGROUND = '#f4f6fb'

    FONT_BOLD = "Helvetica-Bold"
    FONT_REGULAR = "Helvetica"

    MARGIN_LEFT = 2.0*cm
    MARGIN_RIGHT = 2.0*cm
    MARGIN_TOP = 2.0*cm
    MARGIN_BOTTOM = 2.0*cm

    SPACE_L = 1.0*cm
    SPACE_M = 0.7*cm
    SPACE_S = 0.5*cm


def format_brl(value) -> str:
    """1234.5 -> "R$ 1.234,50" """
    text = f"{float(value or 0):,.2f}"
    return "R$ " + text.replace(",", "X").replace(".", ",").replace("X", ".")


def format_date_br(value) -> str:
    if not value:
        return "-"
    if isinstance(value, str):
        value = date.fromisoformat(value[:10])
    return value.strftime('%d/%m/%Y')


def payment_label(method_type, method_name=None, installments=None) -> str:
    if not method_type:
        return "A combinar"
    label = method_name or PAYMENT_METHOD_LABELS.get(method_type, method_type)
    if method_type == "credit_card" and installments:
        label += f" em {installments}x"
    return label


def draw_line(c, y_pos, color=QuoteDesign.LINE, width=0.8):
    c.setStrokeColor(HexColor(color))
    c.setLineWidth(width)
    c.line(QuoteDesign.MARGIN_LEFT, y_pos, A4[0] - QuoteDesign.MARGIN_RIGHT, y_pos)
    return y_pos


def draw_header(c, company_data, y_position):
    """Empresa centralizada no topo"""
    largura = A4[0]
    text_width = largura - QuoteDesign.MARGIN_LEFT - QuoteDesign.MARGIN_RIGHT

    styles = getSampleStyleSheet()
    style = styles['Normal']
    style.alignment = TA_CENTER
    style.fontName = QuoteDesign.FONT_REGULAR

    company_data = company_data or {}
    name = (company_data.get('company_name') or company_data.get('full_name') or '').upper()
    text_content = f"<font name='{QuoteDesign.FONT_BOLD}' size=14>{escape(name)}</font><br/>"

    if company_data.get('document'):
        text_content += f"<font size=9 color='{QuoteDesign.DARK}'>CPF/CNPJ: {escape(company_data['document'])}</font><br/>"

    contact = []
    if company_data.get('address'):
        address = company_data['address']
        if company_data.get('address_number'):
            address += f", {company_data['address_number']}"
        contact.append(address)
    if company_data.get('city'):
        contact.append(f"{company_data['city']}/{company_data.get('state') or ''}".rstrip('/'))
    if company_data.get('phone'):
        contact.append(company_data['phone'])
    if contact:
        text_content += f"<font size=9 color='{QuoteDesign.GRAY}'>{escape(' • '.join(contact))}</font>"

    p = Paragraph(text_content, style)
    w, h = p.wrap(text_width, 6*cm)
    p.drawOn(c, QuoteDesign.MARGIN_LEFT, y_position - h)

    y_position = draw_line(c, y_position - h - QuoteDesign.SPACE_S, QuoteDesign.ACCENT, 1.5)
    return y_position - QuoteDesign.SPACE_L


def draw_title(c, quote_data, y_position):
    title = "COMPROVANTE DE VENDA" if quote_data.get('is_sale') else "ORÇAMENTO"
    c.setFont(QuoteDesign.FONT_BOLD, 18)
    c.setFillColor(HexColor(QuoteDesign.PRIMARY))
    c.drawCentredString(A4[0] / 2, y_position, title)
    y_position -= QuoteDesign.SPACE_M

    c.setFont(QuoteDesign.FONT_REGULAR, 9)
    c.setFillColor(HexColor(QuoteDesign.GRAY))
    dates = f"Emitido em {format_date_br(quote_data.get('quote_date'))}"
    if not quote_data.get('is_sale') and quote_data.get('valid_until'):
        dates += f"  •  Válido até {format_date_br(quote_data.get('valid_until'))}"
    c.drawCentredString(A4[0] / 2, y_position, dates)

    return y_position - QuoteDesign.SPACE_L


def draw_client_info(c, quote_data, y_position):
    """Bloco cliente / veiculo / agendamento"""
    x = QuoteDesign.MARGIN_LEFT
    rows = [("Cliente", quote_data.get('client_name') or '-')]
    if quote_data.get('client_phone'):
        rows.append(("Telefone", quote_data['client_phone']))
    if quote_data.get('client_address'):
        address = quote_data['client_address']
        if quote_data.get('client_address_number'):
            address += f", {quote_data['client_address_number']}"
        if quote_data.get('client_complement'):
            address += f" - {quote_data['client_complement']}"
        rows.append(("Endereço", address))
    rows.append(("Veículo", quote_data.get('vehicle') or '-'))
    if quote_data.get('service_date'):
        when = format_date_br(quote_data['service_date'])
        if quote_data.get('service_time'):
            when += f" às {quote_data['service_time']}"
        rows.append(("Agendado", when))

    for label, value in rows:
        c.setFont(QuoteDesign.FONT_BOLD, 10)
        c.setFillColor(HexColor(QuoteDesign.DARK))
        c.drawString(x, y_position, f"{label}:")
        c.setFont(QuoteDesign.FONT_REGULAR, 10)
        c.setFillColor(HexColor(QuoteDesign.PRIMARY))
        c.drawString(x + 2.6*cm, y_position, str(value)[:80])
        y_position -= QuoteDesign.SPACE_S

    return y_position - QuoteDesign.SPACE_S


def draw_services_table(c, services, y_position):
    """Tabela de servicos; quebra pagina quando necessario"""
    largura = A4[0]
    x_left = QuoteDesign.MARGIN_LEFT
    x_right = largura - QuoteDesign.MARGIN_RIGHT

    def header(y):
        c.setFillColor(HexColor(QuoteDesign.BACKGROUND))
        c.rect(x_left, y - 0.2*cm, x_right - x_left, 0.7*cm, stroke=0, fill=1)
        c.setFont(QuoteDesign.FONT_BOLD, 10)
        c.setFillColor(HexColor(QuoteDesign.ACCENT))
        c.drawString(x_left + 0.2*cm, y, "Serviço")
        c.drawRightString(x_right - 0.2*cm, y, "Valor")
        return y - QuoteDesign.SPACE_M

    y_position = header(y_position)
    c.setFont(QuoteDesign.FONT_REGULAR, 10)

    for service in services:
        if y_position < QuoteDesign.MARGIN_BOTTOM + 5*cm:
            c.showPage()
            y_position = header(A4[1] - QuoteDesign.MARGIN_TOP)
            c.setFont(QuoteDesign.FONT_REGULAR, 10)

        c.setFillColor(HexColor(QuoteDesign.PRIMARY))
        c.drawString(x_left + 0.2*cm, y_position, str(service.get('name') or 'Serviço')[:70])
        c.drawRightString(x_right - 0.2*cm, y_position, format_brl(service.get('final_price')))
        y_position -= 0.2*cm
        draw_line(c, y_position)
        y_position -= QuoteDesign.SPACE_S

    return y_position - QuoteDesign.SPACE_S


def draw_totals(c, quote_data, payment_text, y_position):
    x_label = A4[0] - QuoteDesign.MARGIN_RIGHT - 7*cm
    x_value = A4[0] - QuoteDesign.MARGIN_RIGHT - 0.2*cm

    rows = [("Subtotal", format_brl(quote_data.get('subtotal')))]
    if quote_data.get('discount_value'):
        rows.append(("Desconto", "- " + format_brl(quote_data.get('discount_value'))))

    for label, value in rows:
        c.setFont(QuoteDesign.FONT_REGULAR, 10)
        c.setFillColor(HexColor(QuoteDesign.DARK))
        c.drawString(x_label, y_position, label)
        c.drawRightString(x_value, y_position, value)
        y_position -= QuoteDesign.SPACE_S

    c.setFont(QuoteDesign.FONT_BOLD, 13)
    c.setFillColor(HexColor(QuoteDesign.ACCENT))
    c.drawString(x_label, y_position, "TOTAL")
    c.drawRightString(x_value, y_position, format_brl(quote_data.get('total_price')))
    y_position -= QuoteDesign.SPACE_M

    c.setFont(QuoteDesign.FONT_REGULAR, 9)
    c.setFillColor(HexColor(QuoteDesign.GRAY))
    c.drawString(x_label, y_position, f"Pagamento: {payment_text}")

    return y_position - QuoteDesign.SPACE_L


def draw_notes(c, notes, y_position):
    if not notes:
        return y_position
    styles = getSampleStyleSheet()
    style = styles['Normal']
    style.fontName = QuoteDesign.FONT_REGULAR
    style.fontSize = 9
    style.leading = 12
    style.textColor = HexColor(QuoteDesign.DARK)

    text_width = A4[0] - QuoteDesign.MARGIN_LEFT - QuoteDesign.MARGIN_RIGHT
    p = Paragraph(f"<b>Observações:</b> {escape(notes)}", style)
    w, h = p.wrap(text_width, 8*cm)
    p.drawOn(c, QuoteDesign.MARGIN_LEFT, y_position - h)
    return y_position - h - QuoteDesign.SPACE_M


# ==========================================
# FUNCAO PRINCIPAL (GERADOR)
# ==========================================

def generate_quote_pdf(quote_data: dict, company_data: dict = None, payment_method: dict = None) -> bytes:
    """
    Gera o PDF do orcamento (ou comprovante de venda).
    quote_data e company_data sao os to_dict() de Quote e User.
    """
    buffer = BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    c.setTitle(f"Orcamento {quote_data.get('client_name', '')}")

    try:
        y_pos = A4[1] - QuoteDesign.MARGIN_TOP
        y_pos = draw_header(c, company_data, y_pos)
        y_pos = draw_title(c, quote_data, y_pos)
        y_pos = draw_client_info(c, quote_data, y_pos)
        y_pos = draw_services_table(c, quote_data.get('services_summary') or [], y_pos)

        payment_text = payment_label(
            (payment_method or {}).get('type'),
            (payment_method or {}).get('name'),
            quote_data.get('installments')
        )
        y_pos = draw_totals(c, quote_data, payment_text, y_pos)
        draw_notes(c, quote_data.get('notes'), y_pos)

        c.setFont(QuoteDesign.FONT_REGULAR, 7)
        c.setFillColor(HexColor(QuoteDesign.GRAY))
        c.drawCentredString(A4[0] / 2, QuoteDesign.MARGIN_BOTTOM / 2,
                            f"Gerado em {datetime.now().strftime('%d/%m/%Y %H:%M')}")

        c.showPage()
        c.save()

        pdf_bytes = buffer.getvalue()
        logger.info(f"PDF do orcamento gerado - Total: {format_brl(quote_data.get('total_price'))}")
        return pdf_bytes

    except Exception as e:
        logger.error(f"Erro ao gerar PDF do orcamento: {str(e)}")
        raise
    finally:
        buffer.close()
