# plan_export.py
import calendar
from io import BytesIO

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from workout_engine import summarize_adherence

STATUS_LABELS = {
    "completed": "Done",
    "missed": "Missed",
    "scheduled": "Planned",
    None: "",
}


def _draw_header(c, width, height, header_height, margin_x, title):
    c.setFillColorRGB(0.09, 0.20, 0.45)
    c.rect(0, height - header_height - 10, width, header_height + 10, stroke=0, fill=1)
    c.setFillColorRGB(0.15, 0.40, 0.90)
    c.rect(0, height - header_height, width, header_height, stroke=0, fill=1)

    logo_radius = 9
    logo_cx = margin_x
    logo_cy = height - header_height / 2 - 5

    c.setFillColor(colors.white)
    c.circle(logo_cx, logo_cy, logo_radius, stroke=0, fill=1)

    c.setFillColorRGB(0.11, 0.27, 0.65)
    c.setFont("Helvetica-Bold", 11)
    c.drawCentredString(logo_cx, logo_cy - 3, "F")

    text_x = logo_cx + 2 * logo_radius + 6
    text_y = logo_cy + 2

    c.setFillColor(colors.white)
    c.setFont("Helvetica-Bold", 15)
    c.drawString(text_x, text_y, "FitPlan")

    c.setFont("Helvetica", 8.5)
    c.setFillColorRGB(0.88, 0.94, 1)
    c.drawString(text_x, text_y - 12, "Workout Calendar")

    c.setFont("Helvetica-Bold", 11)
    c.setFillColor(colors.white)
    c.drawCentredString(width / 2, height - header_height + 4, title)


def render_plan_pdf(plan, user_name=""):
    """Render a monthly plan as a PDF calendar. Returns a rewound BytesIO."""
    buffer = BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    width, height = A4

    margin_x = 25 * mm
    margin_y = 25 * mm
    header_height = 32

    month_name = calendar.month_name[plan["month"]]
    title = f"Workout Plan - {month_name} {plan['year']}"
    _draw_header(c, width, height, header_height, margin_x, title)

    y = height - header_height - 20

    # SUMMARY
    summary = summarize_adherence(plan)
    c.setFont("Helvetica-Bold", 11)
    c.setFillColor(colors.black)
    if user_name:
        c.drawString(margin_x, y, f"User: {user_name}")
        y -= 16

    c.setFont("Helvetica", 9.5)
    c.drawString(
        margin_x,
        y,
        f"Workout days: {summary['workout_days']}     Rest days: {summary['rest_days']}",
    )
    y -= 13
    rate = summary["completion_rate"]
    rate_text = f"{int(rate * 100)}%" if rate is not None else "-"
    c.drawString(
        margin_x,
        y,
        f"Completed: {summary['completed']}     Missed: {summary['missed']}"
        f"     Completion rate: {rate_text}",
    )
    y -= 18

    c.setStrokeColorRGB(0.8, 0.85, 0.9)
    c.line(margin_x, y, width - margin_x, y)
    y -= 18

    # DAYS
    c.setFont("Helvetica", 9)
    for w in plan["workouts"]:
        if y < 40:
            c.showPage()
            y = height - margin_y
            c.setFont("Helvetica-Bold", 10.5)
            c.setFillColor(colors.black)
            c.drawString(margin_x, y, f"{title} (continued)")
            y -= 16
            c.setFont("Helvetica", 9)

        if w["type"] == "workout":
            c.setFillColor(colors.black)
            line = f"{w['date']}  {w['title']}  ({w['intensity']}, {w['duration']})"
        else:
            c.setFillColorRGB(0.45, 0.5, 0.6)
            line = f"{w['date']}  {w['title']}"

        c.drawString(margin_x, y, line[:95])
        c.drawRightString(width - margin_x, y, STATUS_LABELS.get(w["status"], ""))
        y -= 13

    c.setFont("Helvetica-Oblique", 8)
    c.setFillColorRGB(0.45, 0.5, 0.6)
    c.drawString(
        margin_x,
        18,
        "Generated by FitPlan • This plan is for educational purposes only.",
    )

    c.showPage()
    c.save()

    buffer.seek(0)
    return buffer
