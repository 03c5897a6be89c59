from fastapi import APIRouter, Depends, status

from school_chat.core.security import Credentials, get_credentials, parse_object_id, unwrap
from school_chat.models.classroom import Assignment, Classroom, Notice
from school_chat.schemas.classroom import (
    AssignmentCreate,
    AssignmentListResponse,
    AssignmentResponse,
    AssignmentUpdate,
    ClassroomCreate,
    ClassroomResponse,
    NoticeCreate,
    NoticeListResponse,
    NoticeResponse,
    NoticeUpdate,
    StudentAdd,
)
from school_chat.schemas.user import IdResponse, SuccessResponse
from school_chat.services import ClassService, get_class_service

router = APIRouter(prefix="/api/v1/classes", tags=["Classes"])


def classroom_to_response(classroom: Classroom) -> ClassroomResponse:
    """Convert Classroom document to ClassroomResponse."""
    return ClassroomResponse(
        id=str(classroom.id),
        name=classroom.name,
        teacher=str(classroom.teacher),
        students=[str(s) for s in classroom.students],
        student_count=len(classroom.students),
    )


def notice_to_response(notice: Notice) -> NoticeResponse:
    return NoticeResponse(
        id=str(notice.id),
        author=str(notice.author),
        title=notice.title,
        description=notice.description,
        image=notice.image,
    )


def assignment_to_response(assignment: Assignment) -> AssignmentResponse:
    return AssignmentResponse(
        id=str(assignment.id),
        author=str(assignment.author),
        title=assignment.title,
        description=assignment.description,
        image=assignment.image,
        due_date=assignment.due_date,
    )


# ==================== Class Endpoints ====================

@router.post(
    "",
    response_model=IdResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new class",
    description="Create a new class (Teacher only).",
)
def create_class(
    class_data: ClassroomCreate,
    credentials: Credentials = Depends(get_credentials),
    classes: ClassService = Depends(get_class_service),
) -> IdResponse:
    result = classes.create_class(credentials.token, credentials.user_id, class_data.name)
    class_id = unwrap(result, UNAUTHORIZED="Only teachers can create classes")
    return IdResponse(id=str(class_id))


@router.get("/{class_id}", response_model=ClassroomResponse, summary="Get class details")
def get_class(
    class_id: str,
    credentials: Credentials = Depends(get_credentials),
    classes: ClassService = Depends(get_class_service),
) -> ClassroomResponse:
    result = classes.get_class_info(
        credentials.token,
        credentials.user_id,
        parse_object_id(class_id, "class id"),
    )
    return classroom_to_response(unwrap(result, NOT_FOUND="Class not found"))


@router.delete("/{class_id}", response_model=SuccessResponse, summary="Delete class")
def delete_class(
    class_id: str,
    credentials: Credentials = Depends(get_credentials),
    classes: ClassService = Depends(get_class_service),
) -> SuccessResponse:
    result = classes.delete_class(
        credentials.token,
        credentials.user_id,
        parse_object_id(class_id, "class id"),
    )
    unwrap(result, NOT_FOUND="Class not found", UNAUTHORIZED="You can only delete your own classes")
    return SuccessResponse()


# ==================== Student Endpoints ====================

@router.post(
    "/{class_id}/students",
    response_model=SuccessResponse,
    summary="Enroll a student",
    description="Add a student to the class roster (Teacher of the class only).",
)
def add_student(
    class_id: str,
    data: StudentAdd,
    credentials: Credentials = Depends(get_credentials),
    classes: ClassService = Depends(get_class_service),
) -> SuccessResponse:
    result = classes.add_student(
        credentials.token,
        credentials.user_id,
        parse_object_id(class_id, "class id"),
        parse_object_id(data.student_id, "student id"),
    )
    unwrap(result, CONFLICT="The student is already enrolled in this class")
    return SuccessResponse()


@router.delete(
    "/{class_id}/students/{student_id}",
    response_model=SuccessResponse,
    summary="Remove a student",
)
def remove_student(
    class_id: str,
    student_id: str,
    credentials: Credentials = Depends(get_credentials),
    classes: ClassService = Depends(get_class_service),
) -> SuccessResponse:
    result = classes.remove_student(
        credentials.token,
        credentials.user_id,
        parse_object_id(class_id, "class id"),
        parse_object_id(student_id, "student id"),
    )
    unwrap(result, CONFLICT="The student is not enrolled in this class")
    return SuccessResponse()


# ==================== Notice Endpoints ====================

@router.post(
    "/{class_id}/notices",
    response_model=IdResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Post a notice",
)
def create_notice(
    class_id: str,
    data: NoticeCreate,
    credentials: Credentials = Depends(get_credentials),
    classes: ClassService = Depends(get_class_service),
) -> IdResponse:
    result = classes.create_notice(
        credentials.token,
        credentials.user_id,
        parse_object_id(class_id, "class id"),
        title=data.title,
        description=data.description,
        image=data.image,
    )
    return IdResponse(id=str(unwrap(result, NOT_FOUND="Class not found")))


@router.get("/{class_id}/notices", response_model=NoticeListResponse, summary="List notices")
def get_notices(
    class_id: str,
    credentials: Credentials = Depends(get_credentials),
    classes: ClassService = Depends(get_class_service),
) -> NoticeListResponse:
    result = classes.get_notices(
        credentials.token,
        credentials.user_id,
        parse_object_id(class_id, "class id"),
    )
    notices = unwrap(result, NOT_FOUND="Class not found")
    return NoticeListResponse(
        notices=[notice_to_response(n) for n in notices],
        total=len(notices),
    )


@router.patch(
    "/{class_id}/notices/{notice_id}",
    response_model=SuccessResponse,
    summary="Edit a notice",
    description="Update only the supplied fields of a notice.",
)
def edit_notice(
    class_id: str,
    notice_id: str,
    data: NoticeUpdate,
    credentials: Credentials = Depends(get_credentials),
    classes: ClassService = Depends(get_class_service),
) -> SuccessResponse:
    result = classes.edit_notice(
        credentials.token,
        credentials.user_id,
        parse_object_id(class_id, "class id"),
        parse_object_id(notice_id, "notice id"),
        title=data.title,
        description=data.description,
        image=data.image,
    )
    unwrap(result, NOT_FOUND="Notice not found")
    return SuccessResponse()


@router.delete("/{class_id}/notices/{notice_id}", response_model=SuccessResponse, summary="Delete a notice")
def delete_notice(
    class_id: str,
    notice_id: str,
    credentials: Credentials = Depends(get_credentials),
    classes: ClassService = Depends(get_class_service),
) -> SuccessResponse:
    result = classes.delete_notice(
        credentials.token,
        credentials.user_id,
        parse_object_id(class_id, "class id"),
        parse_object_id(notice_id, "notice id"),
    )
    unwrap(result, NOT_FOUND="Notice not found")
    return SuccessResponse()


# ==================== Assignment Endpoints ====================

@router.post(
    "/{class_id}/assignments",
    response_model=IdResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Post an assignment",
)
def create_assignment(
    class_id: str,
    data: AssignmentCreate,
    credentials: Credentials = Depends(get_credentials),
    classes: ClassService = Depends(get_class_service),
) -> IdResponse:
    result = classes.create_assignment(
        credentials.token,
        credentials.user_id,
        parse_object_id(class_id, "class id"),
        title=data.title,
        description=data.description,
        due_date=data.due_date,
        image=data.image,
    )
    return IdResponse(id=str(unwrap(result, NOT_FOUND="Class not found")))


@router.get("/{class_id}/assignments", response_model=AssignmentListResponse, summary="List assignments")
def get_assignments(
    class_id: str,
    credentials: Credentials = Depends(get_credentials),
    classes: ClassService = Depends(get_class_service),
) -> AssignmentListResponse:
    result = classes.get_assignments(
        credentials.token,
        credentials.user_id,
        parse_object_id(class_id, "class id"),
    )
    assignments = unwrap(result, NOT_FOUND="Class not found")
    return AssignmentListResponse(
        assignments=[assignment_to_response(a) for a in assignments],
        total=len(assignments),
    )


@router.patch("/{class_id}/assignments/{assignment_id}", response_model=SuccessResponse, summary="Edit an assignment")
def edit_assignment(
    class_id: str,
    assignment_id: str,
    data: AssignmentUpdate,
    credentials: Credentials = Depends(get_credentials),
    classes: ClassService = Depends(get_class_service),
) -> SuccessResponse:
    result = classes.edit_assignment(
        credentials.token,
        credentials.user_id,
        parse_object_id(class_id, "class id"),
        parse_object_id(assignment_id, "assignment id"),
        title=data.title,
        description=data.description,
        image=data.image,
        due_date=data.due_date,
    )
    unwrap(result, NOT_FOUND="Assignment not found")
    return SuccessResponse()


@router.delete("/{class_id}/assignments/{assignment_id}", response_model=SuccessResponse, summary="Delete an assignment")
def delete_assignment(
    class_id: str,
    assignment_id: str,
    credentials: Credentials = Depends(get_credentials),
    classes: ClassService = Depends(get_class_service),
) -> SuccessResponse:
    result = classes.delete_assignment(
        credentials.token,
        credentials.user_id,
        parse_object_id(class_id, "class id"),
        parse_object_id(assignment_id, "assignment id"),
    )
    unwrap(result, NOT_FOUND="Assignment not found")
    return SuccessResponse()
