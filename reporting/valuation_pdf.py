"""
Haven Homes - Property Valuation Report

Generates a fixed-layout PDF from a valuation result.
Uses ReportLab for deterministic PDF generation.

Output Structure:
1. Header / branding block
2. Estimated value (highlighted)
3. Property details
4. Price range
5. Market analysis (only when a market snapshot is supplied)
6. Comparable properties (only when comparables are supplied)
7. Disclaimer

Every content page carries a footer with the wordmark and page number.
"""

from dataclasses import dataclass
from datetime import datetime
from io import BytesIO
from pathlib import Path
from typing import List, Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY, TA_LEFT, TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas
from reportlab.platypus import (
    HRFlowable,
    KeepTogether,
    PageBreak,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from core.valuation.models import (
    ComparableListing,
    MarketSnapshot,
    ValuationInput,
    ValuationReport,
    ValuationResult,
)
from core.valuation.rates import CONDITION_LABELS, amenity_label, type_label
from utils.formatting import CRORE, LAKH, format_area, format_percent


BRAND_NAME = "HAVEN HOMES"
REPORT_TITLE = "Property Valuation Report"
CURRENCY_PREFIX = "BDT"  # Base-14 fonts have no Taka glyph

DISCLAIMER_TEXT = (
    "This valuation is an automated estimate based on location base rates and "
    "the property details provided. It is not a formal appraisal and should not "
    "be relied upon for lending, insurance or legal purposes. Market figures are "
    "indicative only."
)


# =============================================================================
# Report Generation Result Types
# =============================================================================

@dataclass
class ReportSuccess:
    """Returned when PDF generation succeeds."""
    path: Path
    page_count: int


# =============================================================================
# Color Palette
# =============================================================================

class Palette:
    """Print-friendly palette: charcoal text on white with a navy accent."""
    BLACK = colors.Color(0.1, 0.1, 0.1)
    CHARCOAL = colors.Color(0.2, 0.2, 0.22)
    SLATE = colors.Color(0.35, 0.38, 0.42)
    GRAY = colors.Color(0.5, 0.5, 0.5)
    LIGHT_GRAY = colors.Color(0.85, 0.85, 0.85)
    PALE_GRAY = colors.Color(0.95, 0.95, 0.95)
    WHITE = colors.white

    ACCENT = colors.Color(0.1, 0.21, 0.36)
    ACCENT_LIGHT = colors.Color(0.92, 0.94, 0.97)
    GOLD = colors.Color(0.78, 0.6, 0.2)

    POSITIVE = colors.Color(0.13, 0.55, 0.3)
    NEGATIVE = colors.Color(0.75, 0.2, 0.2)


# =============================================================================
# Style Configuration
# =============================================================================

def get_report_styles() -> dict:
    """Create paragraph styles for the valuation report."""
    styles = getSampleStyleSheet()

    styles.add(ParagraphStyle(
        name='Brand',
        parent=styles['Normal'],
        fontSize=16,
        leading=20,
        textColor=Palette.WHITE,
        fontName='Helvetica-Bold',
        alignment=TA_LEFT,
    ))

    styles.add(ParagraphStyle(
        name='BrandSubtitle',
        parent=styles['Normal'],
        fontSize=9,
        leading=12,
        textColor=Palette.ACCENT_LIGHT,
        fontName='Helvetica',
        alignment=TA_LEFT,
    ))

    styles.add(ParagraphStyle(
        name='HeaderMeta',
        parent=styles['Normal'],
        fontSize=8,
        leading=11,
        textColor=Palette.ACCENT_LIGHT,
        fontName='Helvetica',
        alignment=TA_RIGHT,
    ))

    styles.add(ParagraphStyle(
        name='SectionTitle',
        parent=styles['Normal'],
        fontSize=13,
        leading=17,
        textColor=Palette.CHARCOAL,
        fontName='Helvetica-Bold',
        spaceBefore=16,
        spaceAfter=8,
    ))

    styles.add(ParagraphStyle(
        name='EstimateLabel',
        parent=styles['Normal'],
        fontSize=10,
        leading=13,
        textColor=Palette.SLATE,
        fontName='Helvetica',
        alignment=TA_CENTER,
    ))

    styles.add(ParagraphStyle(
        name='EstimateValue',
        parent=styles['Normal'],
        fontSize=26,
        leading=32,
        textColor=Palette.ACCENT,
        fontName='Helvetica-Bold',
        alignment=TA_CENTER,
    ))

    styles.add(ParagraphStyle(
        name='EstimateCompact',
        parent=styles['Normal'],
        fontSize=10,
        leading=13,
        textColor=Palette.GOLD,
        fontName='Helvetica-Bold',
        alignment=TA_CENTER,
    ))

    styles['BodyText'].fontSize = 9.5
    styles['BodyText'].leading = 14
    styles['BodyText'].textColor = Palette.CHARCOAL
    styles['BodyText'].spaceAfter = 6
    styles['BodyText'].fontName = 'Helvetica'

    styles.add(ParagraphStyle(
        name='Disclaimer',
        parent=styles['Normal'],
        fontSize=7.5,
        leading=11,
        textColor=Palette.GRAY,
        alignment=TA_JUSTIFY,
        fontName='Helvetica',
        spaceBefore=12,
    ))

    styles.add(ParagraphStyle(
        name='TableCell',
        parent=styles['Normal'],
        fontSize=9,
        leading=12,
        textColor=Palette.CHARCOAL,
        fontName='Helvetica',
    ))

    return styles


def format_money(amount: int) -> str:
    """Full currency figure, e.g. 'BDT 33,000,000'."""
    return f"{CURRENCY_PREFIX} {amount:,}"


def format_money_compact(amount: int) -> str:
    """Crore/lakh figure, e.g. 'BDT 3.30 Crore'."""
    if amount >= CRORE:
        return f"{CURRENCY_PREFIX} {amount / CRORE:.2f} Crore"
    if amount >= LAKH:
        return f"{CURRENCY_PREFIX} {amount / LAKH:.2f} Lakh"
    return format_money(amount)


def _display(value) -> str:
    return "-" if value is None or value == "" else str(value)


# =============================================================================
# Report Generator Class
# =============================================================================

class ValuationReportGenerator:
    """
    Generates property valuation PDFs.

    Usage:
        generator = ValuationReportGenerator()
        pdf_bytes = generator.generate_to_buffer(valuation_input, result, market)

    Output is deterministic: the same input and timestamp always
    produce the same bytes.
    """

    PAGE_WIDTH, PAGE_HEIGHT = A4
    MARGIN_LEFT = 18*mm
    MARGIN_RIGHT = 18*mm
    MARGIN_TOP = 18*mm
    MARGIN_BOTTOM = 22*mm

    CONTENT_WIDTH = PAGE_WIDTH - MARGIN_LEFT - MARGIN_RIGHT

    OUTPUT_DIR = Path("reports")

    def __init__(self, output_dir: Optional[Path] = None, page_compression: Optional[int] = None):
        self.styles = get_report_styles()
        self.page_compression = page_compression  # None uses ReportLab's default
        self._page_count = 0
        if output_dir is not None:
            self.OUTPUT_DIR = Path(output_dir)

    # =========================================================================
    # Public API
    # =========================================================================

    def generate_to_buffer(
        self,
        valuation_input: ValuationInput,
        result: ValuationResult,
        market: Optional[MarketSnapshot] = None,
        comparables: Optional[List[ComparableListing]] = None,
        reference: Optional[str] = None,
        generated_at: Optional[datetime] = None,
    ) -> bytes:
        """Generate the PDF and return it as bytes."""
        buffer = BytesIO()
        self._build_document(
            buffer,
            valuation_input,
            result,
            market,
            comparables or [],
            reference or "ESTIMATE",
            generated_at or result.created_at or datetime.now(),
        )
        return buffer.getvalue()

    def generate_from_report(
        self,
        report: ValuationReport,
        reference: Optional[str] = None,
        generated_at: Optional[datetime] = None,
    ) -> bytes:
        """Generate the PDF for a complete ValuationReport."""
        return self.generate_to_buffer(
            report.valuation_input,
            report.result,
            report.market,
            report.comparables,
            reference=reference,
            generated_at=generated_at,
        )

    def generate_report(
        self,
        report: ValuationReport,
        reference: str,
        generated_at: Optional[datetime] = None,
    ) -> ReportSuccess:
        """Generate the PDF and write it to OUTPUT_DIR/valuation-<reference>.pdf."""
        self.OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
        output_path = self.OUTPUT_DIR / f"valuation-{reference}.pdf"

        pdf_bytes = self.generate_from_report(report, reference, generated_at)
        output_path.write_bytes(pdf_bytes)

        return ReportSuccess(path=output_path, page_count=self._page_count)

    # =========================================================================
    # Document Assembly
    # =========================================================================

    def _build_document(
        self,
        buffer: BytesIO,
        valuation_input: ValuationInput,
        result: ValuationResult,
        market: Optional[MarketSnapshot],
        comparables: List[ComparableListing],
        reference: str,
        generated_at: datetime,
    ) -> None:
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            leftMargin=self.MARGIN_LEFT,
            rightMargin=self.MARGIN_RIGHT,
            topMargin=self.MARGIN_TOP,
            bottomMargin=self.MARGIN_BOTTOM,
            title=f"{REPORT_TITLE} - {reference}",
            author="Haven Homes",
            subject="Property Valuation",
            invariant=1,
            pageCompression=self.page_compression,
        )

        self._page_count = 0
        story = self.build_story(
            valuation_input, result, market, comparables, reference, generated_at
        )

        doc.build(
            story,
            onFirstPage=self._draw_page_frame,
            onLaterPages=self._draw_page_frame,
        )

    def build_story(
        self,
        valuation_input: ValuationInput,
        result: ValuationResult,
        market: Optional[MarketSnapshot],
        comparables: List[ComparableListing],
        reference: str,
        generated_at: datetime,
    ) -> list:
        """Flowables for every section, in page order."""
        story = []
        story.extend(self._build_header(reference, generated_at))
        story.extend(self._build_estimate(result))
        story.extend(self._build_property_details(valuation_input))
        story.extend(self._build_price_range(result))

        if market is not None or comparables:
            story.append(PageBreak())
        if market is not None:
            story.extend(self._build_market_analysis(market))
        if comparables:
            story.extend(self._build_comparables(comparables))

        story.extend(self._build_disclaimer())
        return story

    def _draw_page_frame(self, canvas_obj: canvas.Canvas, doc):
        """Footer: wordmark left, page number right."""
        self._page_count = doc.page
        canvas_obj.saveState()
        canvas_obj.setFont('Helvetica', 7)
        canvas_obj.setFillColor(Palette.GRAY)

        canvas_obj.drawString(
            self.MARGIN_LEFT,
            self.MARGIN_BOTTOM - 10*mm,
            BRAND_NAME,
        )
        canvas_obj.drawRightString(
            self.PAGE_WIDTH - self.MARGIN_RIGHT,
            self.MARGIN_BOTTOM - 10*mm,
            f"Page {doc.page}",
        )
        canvas_obj.restoreState()

    def _table(self, rows: list, col_widths: list, header: bool = True) -> Table:
        """Standard zebra table, optionally with a dark header row."""
        table = Table(rows, colWidths=col_widths)
        commands = [
            ('FONTNAME', (0, 0), (-1, -1), 'Helvetica'),
            ('FONTSIZE', (0, 0), (-1, -1), 9),
            ('TEXTCOLOR', (0, 0), (-1, -1), Palette.CHARCOAL),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
            ('GRID', (0, 0), (-1, -1), 0.5, Palette.LIGHT_GRAY),
            ('TOPPADDING', (0, 0), (-1, -1), 2.5*mm),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 2.5*mm),
            ('LEFTPADDING', (0, 0), (-1, -1), 3*mm),
            ('RIGHTPADDING', (0, 0), (-1, -1), 3*mm),
        ]
        if header:
            commands += [
                ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
                ('BACKGROUND', (0, 0), (-1, 0), Palette.CHARCOAL),
                ('TEXTCOLOR', (0, 0), (-1, 0), Palette.WHITE),
                ('ROWBACKGROUNDS', (0, 1), (-1, -1), [Palette.WHITE, Palette.PALE_GRAY]),
            ]
        else:
            commands += [
                ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
                ('TEXTCOLOR', (0, 0), (0, -1), Palette.SLATE),
                ('ROWBACKGROUNDS', (0, 0), (-1, -1), [Palette.WHITE, Palette.PALE_GRAY]),
            ]
        table.setStyle(TableStyle(commands))
        return table

    # =========================================================================
    # Section 1: Header
    # =========================================================================

    def _build_header(self, reference: str, generated_at: datetime) -> list:
        brand = [
            Paragraph(BRAND_NAME, self.styles['Brand']),
            Paragraph(REPORT_TITLE, self.styles['BrandSubtitle']),
        ]
        meta = [
            Paragraph(f"Reference: {escape(reference)}", self.styles['HeaderMeta']),
            Paragraph(f"Generated: {generated_at.strftime('%d %B %Y')}", self.styles['HeaderMeta']),
        ]

        header = Table(
            [[brand, meta]],
            colWidths=[self.CONTENT_WIDTH * 0.6, self.CONTENT_WIDTH * 0.4],
        )
        header.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, -1), Palette.ACCENT),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
            ('TOPPADDING', (0, 0), (-1, -1), 5*mm),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 5*mm),
            ('LEFTPADDING', (0, 0), (-1, -1), 5*mm),
            ('RIGHTPADDING', (0, 0), (-1, -1), 5*mm),
        ]))
        return [header, Spacer(1, 8*mm)]

    # =========================================================================
    # Section 2: Estimated Value
    # =========================================================================

    def _build_estimate(self, result: ValuationResult) -> list:
        box = Table(
            [
                [Paragraph("Estimated Property Value", self.styles['EstimateLabel'])],
                [Paragraph(format_money(result.estimated_value), self.styles['EstimateValue'])],
                [Paragraph(format_money_compact(result.estimated_value), self.styles['EstimateCompact'])],
            ],
            colWidths=[self.CONTENT_WIDTH],
        )
        box.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, -1), Palette.ACCENT_LIGHT),
            ('BOX', (0, 0), (-1, -1), 1, Palette.GOLD),
            ('TOPPADDING', (0, 0), (-1, -1), 2*mm),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 2*mm),
        ]))
        return [box, Spacer(1, 4*mm)]

    # =========================================================================
    # Section 3: Property Details
    # =========================================================================

    def _build_property_details(self, valuation_input: ValuationInput) -> list:
        amenities = ", ".join(amenity_label(a) for a in valuation_input.amenities)
        rows = [
            ["Property Type", type_label(valuation_input.property_type)],
            ["Location", valuation_input.location],
            ["Area", format_area(valuation_input.area_sqft)],
            ["Bedrooms", _display(valuation_input.bedrooms)],
            ["Bathrooms", _display(valuation_input.bathrooms)],
            ["Age", f"{valuation_input.age_years} years"],
            ["Condition", CONDITION_LABELS[valuation_input.condition]],
            ["Amenities", Paragraph(escape(amenities) or "None", self.styles['TableCell'])],
        ]
        table = self._table(rows, [self.CONTENT_WIDTH * 0.35, self.CONTENT_WIDTH * 0.65], header=False)
        return [
            Paragraph("Property Details", self.styles['SectionTitle']),
            table,
        ]

    # =========================================================================
    # Section 4: Price Range
    # =========================================================================

    def _build_price_range(self, result: ValuationResult) -> list:
        rows = [
            ["Low Estimate", "Mid Estimate", "High Estimate", "Price / sq ft"],
            [
                format_money(result.low_estimate),
                format_money(result.estimated_value),
                format_money(result.high_estimate),
                format_money(result.price_per_sqft),
            ],
        ]
        table = self._table(rows, [self.CONTENT_WIDTH / 4] * 4)
        table.setStyle(TableStyle([
            ('ALIGN', (0, 0), (-1, -1), 'CENTER'),
            ('FONTNAME', (1, 1), (1, 1), 'Helvetica-Bold'),
            ('TEXTCOLOR', (1, 1), (1, 1), Palette.ACCENT),
        ]))
        return [
            Paragraph("Price Range", self.styles['SectionTitle']),
            table,
        ]

    # =========================================================================
    # Section 5: Market Analysis
    # =========================================================================

    def _build_market_analysis(self, market: MarketSnapshot) -> list:
        trend = market.year_over_year_change_percent
        rows = [
            ["Metric", "Value"],
            ["Average Price / sq ft", format_money(market.avg_price_per_sqft)],
            ["Year-over-Year Change", format_percent(trend, signed=True)],
            ["Active Listings", f"{market.active_listing_count:,}"],
            ["Average Days on Market", f"{market.avg_days_on_market} days"],
        ]
        table = self._table(rows, [self.CONTENT_WIDTH * 0.5, self.CONTENT_WIDTH * 0.5])
        table.setStyle(TableStyle([
            ('TEXTCOLOR', (1, 2), (1, 2), Palette.POSITIVE if trend >= 0 else Palette.NEGATIVE),
        ]))
        return [
            KeepTogether([
                Paragraph(f"Market Analysis - {escape(market.location)}", self.styles['SectionTitle']),
                table,
            ]),
        ]

    # =========================================================================
    # Section 6: Comparable Properties
    # =========================================================================

    def _build_comparables(self, comparables: List[ComparableListing]) -> list:
        rows = [["Property", "Area", "Price", "Price / sq ft"]]
        for comp in comparables:
            per_sqft = round(comp.price / comp.area_sqft) if comp.area_sqft else 0
            rows.append([
                comp.title,
                format_area(comp.area_sqft),
                format_money(comp.price),
                format_money(per_sqft),
            ])
        width = self.CONTENT_WIDTH
        table = self._table(rows, [width * 0.34, width * 0.18, width * 0.26, width * 0.22])
        return [
            Paragraph("Similar Properties", self.styles['SectionTitle']),
            table,
        ]

    # =========================================================================
    # Section 7: Disclaimer
    # =========================================================================

    def _build_disclaimer(self) -> list:
        return [
            Spacer(1, 6*mm),
            HRFlowable(width="100%", thickness=0.5, color=Palette.LIGHT_GRAY),
            Paragraph(DISCLAIMER_TEXT, self.styles['Disclaimer']),
        ]


# =============================================================================
# Convenience Function
# =============================================================================

def generate_report(
    report: ValuationReport,
    reference: str,
    output_dir: Optional[Path] = None,
) -> ReportSuccess:
    """
    Generate a valuation PDF on disk.

    Example:
        from core.valuation import PropertyValuationEngine, ValuationInput
        from reporting import generate_report

        report = PropertyValuationEngine().appraise(valuation_input)
        result = generate_report(report, reference="VAL-0001")
        print(result.path)
    """
    generator = ValuationReportGenerator(output_dir=output_dir)
    return generator.generate_report(report, reference)
