"""领域层。"""
