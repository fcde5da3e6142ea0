from datetime import date
import logging

from fastapi import APIRouter, HTTPException, Response
from starlette.concurrency import run_in_threadpool

from mealdoc.domain.MealPlan import MealPlanContent
from mealdoc.infra.pdf_utils import render_meal_plan
from mealdoc.utilities.errors import DocumentGenerationError, is_font_error
from mealdoc.utilities.text import format_grocery_list, format_nutrition_info, format_number, sanitize_text
from mealdoc.utilities.validators import ExportRequest

router = APIRouter(prefix="/api/mealplan")
logger = logging.getLogger(__name__)


def _error_message(error: DocumentGenerationError) -> str:
    """User-facing message for a failed export."""
    message = str(error)
    if is_font_error(error):
        logger.error("Font-related PDF error: %s", message)
        return ("PDF generation failed due to font configuration issue. Please try regenerating "
                "the plan or contact support if this persists.")
    if 'plan_data' in message or 'structure' in message:
        logger.error("Data structure PDF error: %s", message)
        return "PDF generation failed due to invalid meal plan data. Please try regenerating the plan."
    logger.error("PDF generation error: %s", message)
    return message or "Failed to generate PDF. Please try again or contact support."


@router.post("/export-pdf")
async def export_pdf(payload: ExportRequest):
    try:
        result = await run_in_threadpool(render_meal_plan, payload.plan_data, payload.render_options())
    except DocumentGenerationError as e:
        raise HTTPException(status_code=500, detail=_error_message(e))

    filename = f"meal-plan-{date.today().isoformat()}.pdf"
    return Response(
        content=result.pdf,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "X-Page-Count": str(result.page_count),
        },
    )


@router.post("/export-text", response_class=Response)
def export_text(payload: ExportRequest):
    """Plain-text summary of the plan: overview, meals per day and grocery list."""
    content = MealPlanContent.from_dict(payload.plan_data)
    lines = [f"{payload.plan_type.upper()} PLAN"]
    overview = content.overview
    if overview:
        if overview.daily_calories:
            lines.append(f"Daily calories: {format_number(overview.daily_calories)} kcal")
        macros = format_nutrition_info(overview.macros)
        if macros:
            lines.append(f"Macros: {macros}")
    for day in content.valid_days():
        lines.append("")
        lines.append(f"Day {day.day}")
        for slot, meal in day.meals().items():
            info = format_nutrition_info(meal.nutrition)
            lines.append(f"  {slot.capitalize()}: {sanitize_text(meal.name) or '-'}" + (f" ({info})" if info else ""))
        for snack in day.snacks:
            lines.append(f"  Snack: {sanitize_text(snack.name) or 'Snack'}")
    if content.grocery_list:
        lines.append("")
        lines.append("Grocery list")
        lines.append(format_grocery_list(content.grocery_list))
    return Response(content="\n".join(lines), media_type="text/plain")
