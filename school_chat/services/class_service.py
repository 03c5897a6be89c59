"""
Class Service
Classes, their student roster, notices and assignments.

Every operation checks, in order: the caller's token, that the class exists,
the caller's role in the class, conflicts with the current state. Only then
is the class document updated, with a filter that restates the conflict
check so a concurrent writer cannot slip a duplicate in between.
"""

import logging
from datetime import datetime
from typing import Optional, Tuple

from bson import ObjectId

from school_chat.core.results import Result, Status, created, fail, guarded, ok, require_ack
from school_chat.database import Database
from school_chat.models.classroom import Assignment, Classroom, Notice
from school_chat.services.auth_service import AuthorizationGate
from school_chat.services.membership import ClassRole, class_role

logger = logging.getLogger(__name__)

NOTICES = "notices"
ASSIGNMENTS = "assignments"


class ClassService:
    """Service for classes and everything embedded in them."""

    def __init__(self, db: Database, gate: AuthorizationGate):
        self.classes = db.classes
        self.users = db.users
        self.gate = gate

    def _get(self, class_id: ObjectId) -> Optional[Classroom]:
        document = self.classes.find_one({"_id": class_id})
        return Classroom.from_document(document) if document else None

    def _load(self, token, user_id, class_id) -> Tuple[Optional[Classroom], Optional[Result]]:
        """Token check followed by the existence check."""
        if not self.gate.is_valid(token, user_id):
            return None, fail(Status.UNAUTHORIZED)

        classroom = self._get(class_id)
        if classroom is None:
            return None, fail(Status.NOT_FOUND)

        return classroom, None

    def _load_as_teacher(self, token, user_id, class_id) -> Tuple[Optional[Classroom], Optional[Result]]:
        classroom, failure = self._load(token, user_id, class_id)
        if failure:
            return None, failure

        if class_role(classroom, user_id) is not ClassRole.TEACHER:
            logger.debug("User %s is not the teacher of class %s", user_id, class_id)
            return None, fail(Status.UNAUTHORIZED)

        return classroom, None

    # ==================== Classes ====================

    @guarded
    def create_class(self, token: ObjectId, user_id: ObjectId, name: str) -> Result:
        """Create a class taught by the caller. Teachers only."""
        if not self.gate.is_valid(token, user_id):
            return fail(Status.UNAUTHORIZED)

        user = self.users.find_one({"_id": user_id}, {"teacher": 1})
        if not user or not user.get("teacher"):
            return fail(Status.UNAUTHORIZED)

        classroom = Classroom(name=name, teacher=user_id)
        result = require_ack(self.classes.insert_one(classroom.to_document()))
        require_ack(self.users.update_one({"_id": user_id}, {"$addToSet": {"classes": result.inserted_id}}))

        logger.info("User %s created class %s", user_id, result.inserted_id)
        return created(result.inserted_id)

    @guarded
    def get_class_info(self, token: ObjectId, user_id: ObjectId, class_id: ObjectId) -> Result:
        classroom, failure = self._load(token, user_id, class_id)
        if failure:
            return failure
        return ok(classroom)

    @guarded
    def delete_class(self, token: ObjectId, user_id: ObjectId, class_id: ObjectId) -> Result:
        classroom, failure = self._load_as_teacher(token, user_id, class_id)
        if failure:
            return failure

        result = require_ack(self.classes.delete_one({"_id": class_id}))
        if result.deleted_count == 0:
            return fail(Status.NOT_FOUND)

        require_ack(self.users.update_many({"classes": class_id}, {"$pull": {"classes": class_id}}))

        logger.info("User %s deleted class %s", user_id, class_id)
        return ok()

    # ==================== Students ====================

    @guarded
    def add_student(self, token: ObjectId, user_id: ObjectId, class_id: ObjectId, target_id: ObjectId) -> Result:
        """
        Enroll a student in the class.

        Returns:
            OK on success; NOT_FOUND if the class or target user is missing;
            UNAUTHORIZED if the caller is not the teacher or the target is a
            teacher; CONFLICT if the target is already enrolled
        """
        classroom, failure = self._load_as_teacher(token, user_id, class_id)
        if failure:
            return failure

        target = self.users.find_one({"_id": target_id}, {"teacher": 1})
        if not target:
            return fail(Status.NOT_FOUND)
        if target.get("teacher"):
            return fail(Status.UNAUTHORIZED)

        if class_role(classroom, target_id) is not ClassRole.OUTSIDER:
            return fail(Status.CONFLICT)

        result = require_ack(self.classes.update_one(
            {"_id": class_id, "students": {"$ne": target_id}},
            {"$push": {"students": target_id}},
        ))
        if result.matched_count == 0:
            return fail(Status.CONFLICT)

        require_ack(self.users.update_one({"_id": target_id}, {"$addToSet": {"classes": class_id}}))

        logger.info("Added student %s to class %s", target_id, class_id)
        return ok()

    @guarded
    def remove_student(self, token: ObjectId, user_id: ObjectId, class_id: ObjectId, target_id: ObjectId) -> Result:
        classroom, failure = self._load_as_teacher(token, user_id, class_id)
        if failure:
            return failure

        if class_role(classroom, target_id) is not ClassRole.STUDENT:
            return fail(Status.CONFLICT)

        result = require_ack(self.classes.update_one(
            {"_id": class_id, "students": target_id},
            {"$pull": {"students": target_id}},
        ))
        if result.matched_count == 0:
            return fail(Status.CONFLICT)

        require_ack(self.users.update_one({"_id": target_id}, {"$pull": {"classes": class_id}}))

        logger.info("Removed student %s from class %s", target_id, class_id)
        return ok()

    # ==================== Notices & Assignments ====================

    def _push_entry(self, token, user_id, class_id, field: str, entry: Notice) -> Result:
        classroom, failure = self._load_as_teacher(token, user_id, class_id)
        if failure:
            return failure

        result = require_ack(self.classes.update_one(
            {"_id": class_id},
            {"$push": {field: entry.to_document()}},
        ))
        if result.matched_count == 0:
            return fail(Status.NOT_FOUND)

        logger.info("Posted %s entry %s to class %s", field, entry.id, class_id)
        return created(entry.id)

    def _edit_entry(self, token, user_id, class_id, field: str, entry_id: ObjectId, changes: dict) -> Result:
        """Patch the supplied fields of the embedded entry matching ``entry_id``."""
        classroom, failure = self._load_as_teacher(token, user_id, class_id)
        if failure:
            return failure

        if not any(entry.id == entry_id for entry in getattr(classroom, field)):
            return fail(Status.NOT_FOUND)

        changes = {key: value for key, value in changes.items() if value is not None}
        if not changes:
            return ok()

        result = require_ack(self.classes.update_one(
            {"_id": class_id, f"{field}._id": entry_id},
            {"$set": {f"{field}.$.{key}": value for key, value in changes.items()}},
        ))
        if result.matched_count == 0:
            return fail(Status.NOT_FOUND)

        logger.info("Edited %s entry %s in class %s", field, entry_id, class_id)
        return ok()

    def _delete_entry(self, token, user_id, class_id, field: str, entry_id: ObjectId) -> Result:
        classroom, failure = self._load_as_teacher(token, user_id, class_id)
        if failure:
            return failure

        result = require_ack(self.classes.update_one(
            {"_id": class_id, f"{field}._id": entry_id},
            {"$pull": {field: {"_id": entry_id}}},
        ))
        if result.matched_count == 0:
            return fail(Status.NOT_FOUND)

        logger.info("Deleted %s entry %s from class %s", field, entry_id, class_id)
        return ok()

    def _list_entries(self, token, user_id, class_id, field: str) -> Result:
        classroom, failure = self._load(token, user_id, class_id)
        if failure:
            return failure

        if class_role(classroom, user_id) is ClassRole.OUTSIDER:
            return fail(Status.UNAUTHORIZED)

        return ok(getattr(classroom, field))

    @guarded
    def create_notice(
        self,
        token: ObjectId,
        user_id: ObjectId,
        class_id: ObjectId,
        title: str,
        description: str,
        image: Optional[str] = None,
    ) -> Result:
        notice = Notice(author=user_id, title=title, description=description, image=image)
        return self._push_entry(token, user_id, class_id, NOTICES, notice)

    @guarded
    def edit_notice(
        self,
        token: ObjectId,
        user_id: ObjectId,
        class_id: ObjectId,
        notice_id: ObjectId,
        title: Optional[str] = None,
        description: Optional[str] = None,
        image: Optional[str] = None,
    ) -> Result:
        changes = {"title": title, "description": description, "image": image}
        return self._edit_entry(token, user_id, class_id, NOTICES, notice_id, changes)

    @guarded
    def delete_notice(self, token: ObjectId, user_id: ObjectId, class_id: ObjectId, notice_id: ObjectId) -> Result:
        return self._delete_entry(token, user_id, class_id, NOTICES, notice_id)

    @guarded
    def get_notices(self, token: ObjectId, user_id: ObjectId, class_id: ObjectId) -> Result:
        return self._list_entries(token, user_id, class_id, NOTICES)

    @guarded
    def create_assignment(
        self,
        token: ObjectId,
        user_id: ObjectId,
        class_id: ObjectId,
        title: str,
        description: str,
        due_date: datetime,
        image: Optional[str] = None,
    ) -> Result:
        assignment = Assignment(
            author=user_id,
            title=title,
            description=description,
            image=image,
            due_date=due_date,
        )
        return self._push_entry(token, user_id, class_id, ASSIGNMENTS, assignment)

    @guarded
    def edit_assignment(
        self,
        token: ObjectId,
        user_id: ObjectId,
        class_id: ObjectId,
        assignment_id: ObjectId,
        title: Optional[str] = None,
        description: Optional[str] = None,
        image: Optional[str] = None,
        due_date: Optional[datetime] = None,
    ) -> Result:
        changes = {"title": title, "description": description, "image": image, "due_date": due_date}
        return self._edit_entry(token, user_id, class_id, ASSIGNMENTS, assignment_id, changes)

    @guarded
    def delete_assignment(self, token: ObjectId, user_id: ObjectId, class_id: ObjectId, assignment_id: ObjectId) -> Result:
        return self._delete_entry(token, user_id, class_id, ASSIGNMENTS, assignment_id)

    @guarded
    def get_assignments(self, token: ObjectId, user_id: ObjectId, class_id: ObjectId) -> Result:
        return self._list_entries(token, user_id, class_id, ASSIGNMENTS)
